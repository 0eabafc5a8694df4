# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Choose the signing scheme for a request from the service it targets."""

import logging
import warnings
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from ._http import AWSRequest
from .endpoints import service_and_region
from .exceptions import AWSSDKWarning, UnknownServiceError
from .interfaces.auth import Signer
from .interfaces.identity import AWSCredentialsIdentity
from .signers import S3Signer, SigV2Signer, SigV3Signer, SigV4Signer

logger = logging.getLogger(__name__)


class SignatureVersion(Enum):
    """The signing schemes AWS services accept."""

    V2 = "v2"
    """Query string HMAC-SHA256."""

    V3 = "v3"
    """Header HMAC-SHA256 over the request timestamp."""

    V4 = "v4"
    """Canonical request HMAC-SHA256 with a scoped signing key."""

    S3 = "s3"
    """The Amazon S3 custom HMAC-SHA1 scheme."""


SIGNATURE_VERSIONS: Mapping[str, SignatureVersion] = MappingProxyType(
    {
        "autoscaling": SignatureVersion.V4,
        "cloudfront": SignatureVersion.V4,
        "cloudformation": SignatureVersion.V4,
        "cloudsearch": SignatureVersion.V4,
        "monitoring": SignatureVersion.V4,
        "dynamodb": SignatureVersion.V4,
        "ec2": SignatureVersion.V2,
        "elasticmapreduce": SignatureVersion.V4,
        "elastictranscoder": SignatureVersion.V4,
        "elasticache": SignatureVersion.V2,
        "execute-api": SignatureVersion.V4,
        "glacier": SignatureVersion.V4,
        "kinesis": SignatureVersion.V4,
        "redshift": SignatureVersion.V4,
        "rds": SignatureVersion.V4,
        "sdb": SignatureVersion.V2,
        "sns": SignatureVersion.V4,
        "sqs": SignatureVersion.V4,
        "sts": SignatureVersion.V4,
        "s3": SignatureVersion.S3,
        "elasticbeanstalk": SignatureVersion.V4,
        "importexport": SignatureVersion.V2,
        "iam": SignatureVersion.V4,
        "route53": SignatureVersion.V3,
        "elasticloadbalancing": SignatureVersion.V4,
        # Simple Email Service
        "email": SignatureVersion.V3,
    }
)


def signature_version_for(
    service: str, default: SignatureVersion | None = SignatureVersion.V4
) -> SignatureVersion:
    """Look up the signature version a service expects.

    :param service: The service identifier, for example ``iam``.
    :param default: Version to use for services missing from the registry. When
        ``None``, unknown services raise :py:class:`UnknownServiceError`.
    """
    version = SIGNATURE_VERSIONS.get(service.lower())
    if version is not None:
        return version
    if default is None:
        raise UnknownServiceError(service)
    warnings.warn(
        f"No signature version is registered for service {service!r}, "
        f"falling back to {default.name}.",
        AWSSDKWarning,
        stacklevel=2,
    )
    return default


class RequestSigner:
    """Signs requests with whichever scheme their target service requires."""

    def __init__(
        self, *, default_version: SignatureVersion | None = SignatureVersion.V4
    ) -> None:
        """:param default_version: Scheme for services missing from
        ``SIGNATURE_VERSIONS``. ``None`` makes such requests fail with
        :py:class:`UnknownServiceError` instead."""
        self._default_version = default_version
        self._signers: dict[SignatureVersion, Signer[AWSRequest]] = {
            SignatureVersion.V2: SigV2Signer(),
            SignatureVersion.V3: SigV3Signer(),
            SignatureVersion.V4: SigV4Signer(),
            SignatureVersion.S3: S3Signer(),
        }

    def signer_for(self, version: SignatureVersion) -> Signer[AWSRequest]:
        return self._signers[version]

    def sign(
        self, *, request: AWSRequest, identity: AWSCredentialsIdentity
    ) -> AWSRequest:
        """Sign ``request`` in place and return it.

        :param request: The request to sign.
        :param identity: Resolved credentials to sign with.
        """
        service, region = service_and_region(request.host)
        version = signature_version_for(service, default=self._default_version)
        logger.debug(
            "Signing request to %s (%s) with signature version %s.",
            service,
            region,
            version.name,
        )
        return self.signer_for(version).sign(request=request, identity=identity)


_DEFAULT_SIGNER = RequestSigner()


def sign(request: AWSRequest, identity: AWSCredentialsIdentity) -> AWSRequest:
    """Sign ``request`` with the scheme its target service requires.

    Services missing from the registry are signed with SigV4 and emit an
    :py:class:`AWSSDKWarning`.
    """
    return _DEFAULT_SIGNER.sign(request=request, identity=identity)
