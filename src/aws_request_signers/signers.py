# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import logging
from dataclasses import dataclass
from email.utils import format_datetime
from typing import TypedDict
from urllib.parse import quote, urlencode

from ._canonical import (
    canonical_query_string,
    capture_body,
    normalize_path,
    parse_query,
)
from ._crypto import base64_digest, hmac_sha1, hmac_sha256, sha256_hex
from ._http import AWSRequest, Field
from ._identity import ensure_utc
from .endpoints import bucket_from_host, is_virtual_hosted_s3, service_and_region
from .exceptions import MissingExpectedParameterException
from .interfaces.identity import AWSCredentialsIdentity

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"

SIGV2_TIMESTAMP_FORMAT: str = "%Y-%m-%dT%H:%M:%S"
SIGV4_TIMESTAMP_FORMAT: str = "%Y%m%dT%H%M%SZ"

SIGV4_ALGORITHM = "AWS4-HMAC-SHA256"
SIGV4_TERMINATOR = "aws4_request"
SIGV4_SIGNED_HEADERS: tuple[str, ...] = ("content-type", "host", "x-amz-date")

S3_AMZ_HEADER_PREFIX = "x-amz"
S3_SUBRESOURCES: tuple[str, ...] = (
    "acl",
    "lifecycle",
    "location",
    "logging",
    "notification",
    "partNumber",
    "policy",
    "requestPayment",
    "torrent",
    "uploadId",
    "uploads",
    "versionId",
    "versioning",
    "versions",
    "website",
)


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


class BaseSigner:
    """Shared identity handling for every signing scheme."""

    def _validate_identity(self, *, identity: AWSCredentialsIdentity) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, AWSCredentialsIdentity):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"AWSCredentialIdentity but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _apply_security_token(
        self, *, request: AWSRequest, identity: AWSCredentialsIdentity
    ) -> None:
        # STS issued credentials are only accepted alongside their session token.
        if identity.session_token:
            request.fields.set_value("X-Amz-Security-Token", identity.session_token)


class SigV4SigningProperties(TypedDict, total=False):
    region: str
    service: str
    date: str


@dataclass
class SigningMetadata:
    """Values computed while signing a request with SigV4.

    Each of the three signing tasks fills in part of the metadata for the tasks
    that follow it.
    """

    algorithm: str = ""
    credential_scope: str = ""
    signed_headers: str = ""
    date: str = ""
    region: str = ""
    service: str = ""


class SigV4Signer(BaseSigner):
    """Request signer for applying the AWS Signature Version 4 algorithm."""

    def sign(
        self,
        *,
        request: AWSRequest,
        identity: AWSCredentialsIdentity,
        properties: SigV4SigningProperties | None = None,
    ) -> AWSRequest:
        """Generate and apply a SigV4 Signature to the supplied request.

        The request is modified in place and returned.

        :param request: An AWSRequest to sign prior to sending to the service.
        :param identity: A set of credentials representing an AWS Identity or role
            capacity.
        :param properties: Optional overrides for the signing region, service and
            date. Region and service are otherwise derived from the request host.
        """
        properties = properties or SigV4SigningProperties()
        self._validate_identity(identity=identity)
        self._apply_security_token(request=request, identity=identity)
        self.prepare(request=request, properties=properties)
        metadata = SigningMetadata()

        # Task 1
        hashed_canonical_request = self.hashed_canonical_request(
            request=request, metadata=metadata
        )

        # Task 2
        string_to_sign = self.string_to_sign(
            request=request,
            hashed_canonical_request=hashed_canonical_request,
            metadata=metadata,
            properties=properties,
        )

        # Task 3
        signing_key = self.signing_key(
            secret_key=identity.secret_access_key,
            date=metadata.date,
            region=metadata.region,
            service=metadata.service,
        )
        signature = self.signature(
            signing_key=signing_key, string_to_sign=string_to_sign
        )

        request.fields.set_field(
            self.generate_authorization_field(
                access_key_id=identity.access_key_id,
                signature=signature,
                metadata=metadata,
            )
        )
        return request

    def prepare(
        self,
        *,
        request: AWSRequest,
        properties: SigV4SigningProperties | None = None,
    ) -> AWSRequest:
        """Fill in the fields SigV4 requires without overwriting existing ones."""
        properties = properties or SigV4SigningProperties()
        timestamp = properties.get("date") or _now().strftime(SIGV4_TIMESTAMP_FORMAT)
        request.fields.setdefault("Content-Type", DEFAULT_CONTENT_TYPE)
        request.fields.setdefault("X-Amz-Date", timestamp)
        if not request.destination.path:
            request.destination = request.destination.with_changes(path="/")
        return request

    def canonical_request(self, *, request: AWSRequest, metadata: SigningMetadata) -> str:
        """The canonical request is a standardized string laying out the components used
        in the SigV4 signing algorithm. This is useful to quickly compare inputs to find
        signature mismatches and unintended variances.

        The canonical request is defined as:
            <HTTPMethod>\n
            <CanonicalURI>\n
            <CanonicalQueryString>\n
            <CanonicalHeaders>\n
            <SignedHeaders>\n
            <HashedPayload>

        Only ``content-type``, ``host`` and ``x-amz-date`` are signed. The path and
        query are used exactly as they appear on the request.

        :param request: A prepared AWSRequest.
        :param metadata: Receives the signed header list.
        """
        hashed_payload = sha256_hex(capture_body(request))
        canonical_headers = "".join(
            f"{name}:{value}\n"
            for name, value in self._signed_header_values(request=request).items()
        )
        metadata.signed_headers = ";".join(SIGV4_SIGNED_HEADERS)
        return "\n".join(
            (
                request.method,
                request.destination.path or "/",
                request.destination.query or "",
                canonical_headers,
                metadata.signed_headers,
                hashed_payload,
            )
        )

    def hashed_canonical_request(
        self, *, request: AWSRequest, metadata: SigningMetadata
    ) -> str:
        canonical_request = self.canonical_request(request=request, metadata=metadata)
        logger.debug("Canonical request:\n%s", canonical_request)
        return sha256_hex(canonical_request)

    def _signed_header_values(self, *, request: AWSRequest) -> dict[str, str]:
        host = request.fields.value_of("Host") or request.destination.host_header
        return {
            "content-type": request.fields.value_of("Content-Type"),
            "host": host,
            "x-amz-date": request.fields.value_of("X-Amz-Date"),
        }

    def string_to_sign(
        self,
        *,
        request: AWSRequest,
        hashed_canonical_request: str,
        metadata: SigningMetadata,
        properties: SigV4SigningProperties | None = None,
    ) -> str:
        """The string to sign is the second step of our signing algorithm which
        concatenates the formal identifier of our signing algorithm, the signing
        DateTime, the scope of our credentials, and a hash of our previously generated
        canonical request.

        The string to sign is defined as:
            Algorithm \n
            RequestDateTime \n
            CredentialScope  \n
            HashedCanonicalRequest

        :param request: The prepared AWSRequest carrying an ``X-Amz-Date`` field.
        :param hashed_canonical_request: Output of ``hashed_canonical_request``.
        :param metadata: Receives the algorithm, date, region, service and scope.
        :param properties: Optional region and service overrides.
        """
        timestamp = request.fields.value_of("X-Amz-Date")
        if not timestamp:
            raise MissingExpectedParameterException(
                "Cannot generate string_to_sign without an X-Amz-Date field "
                "on the request. Call prepare first."
            )
        properties = properties or SigV4SigningProperties()
        service, region = service_and_region(request.host)

        metadata.algorithm = SIGV4_ALGORITHM
        metadata.service = properties.get("service") or service
        metadata.region = properties.get("region") or region
        metadata.date = timestamp[0:8]
        # Scope format: <YYYYMMDD>/<AWS Region>/<AWS Service>/aws4_request
        metadata.credential_scope = "/".join(
            (metadata.date, metadata.region, metadata.service, SIGV4_TERMINATOR)
        )
        string_to_sign = "\n".join(
            (
                metadata.algorithm,
                timestamp,
                metadata.credential_scope,
                hashed_canonical_request,
            )
        )
        logger.debug("String to sign:\n%s", string_to_sign)
        return string_to_sign

    def signing_key(
        self, *, secret_key: str, date: str, region: str, service: str
    ) -> bytes:
        """Derive the signing key scoped to a date, region and service.

        Components of Signing Key Calculation:

            DateKey              = HMAC-SHA256("AWS4"+"<SecretAccessKey>", "<YYYYMMDD>")
            DateRegionKey        = HMAC-SHA256(<DateKey>, "<aws-region>")
            DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<aws-service>")
            SigningKey           = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")
        """
        k_date = hmac_sha256(f"AWS4{secret_key}".encode(), date)
        k_region = hmac_sha256(k_date, region)
        k_service = hmac_sha256(k_region, service)
        return hmac_sha256(k_service, SIGV4_TERMINATOR)

    def signature(self, *, signing_key: bytes, string_to_sign: str) -> str:
        return hmac_sha256(signing_key, string_to_sign).hex()

    def generate_authorization_field(
        self, *, access_key_id: str, signature: str, metadata: SigningMetadata
    ) -> Field:
        """Generate the `Authorization` field.

        :param access_key_id: The access key of the signing identity.
        :param signature: Final hash of the SigV4 signing algorithm.
        :param metadata: Metadata filled in by the signing tasks.
        """
        auth_str = (
            f"{metadata.algorithm} Credential={access_key_id}/"
            f"{metadata.credential_scope}, "
            f"SignedHeaders={metadata.signed_headers}, Signature={signature}"
        )
        return Field(name="Authorization", values=[auth_str])


class SigV2Signer(BaseSigner):
    """Request signer for the query string based AWS Signature Version 2.

    Prefer :py:class:`SigV4Signer` for services that support it.
    """

    def sign(
        self, *, request: AWSRequest, identity: AWSCredentialsIdentity
    ) -> AWSRequest:
        """Add the SigV2 authentication parameters and signature to the query.

        :param request: The request to sign in place.
        :param identity: Credentials to sign with.
        """
        self._validate_identity(identity=identity)
        self.prepare(request=request, identity=identity)

        string_to_sign = self.string_to_sign(request=request)
        signature = self.signature(
            secret_key=identity.secret_access_key, string_to_sign=string_to_sign
        )
        self._merge_query(request, {"Signature": signature})
        return request

    def prepare(
        self, *, request: AWSRequest, identity: AWSCredentialsIdentity
    ) -> AWSRequest:
        """Add the authentication parameters to the query string.

        The credential and algorithm parameters always reflect ``identity``. A
        ``Timestamp`` already present on the request is kept.
        """
        params = parse_query(request.destination.query)
        # The token is part of the signed query and belongs to the current identity.
        params.pop("SecurityToken", None)
        if identity.session_token:
            params["SecurityToken"] = identity.session_token
        params.setdefault("Timestamp", _now().strftime(SIGV2_TIMESTAMP_FORMAT))
        params.update(
            {
                "AWSAccessKeyId": identity.access_key_id,
                "SignatureVersion": "2",
                "SignatureMethod": "HmacSHA256",
            }
        )
        request.destination = request.destination.with_changes(
            path=request.destination.path or "/",
            query=canonical_query_string(params),
        )
        return request

    def canonical_query(self, *, request: AWSRequest) -> str:
        params = parse_query(request.destination.query)
        # A signature from an earlier attempt is never part of the new one.
        params.pop("Signature", None)
        return canonical_query_string(params)

    def string_to_sign(self, *, request: AWSRequest) -> str:
        string_to_sign = "\n".join(
            (
                request.method.upper(),
                request.host.lower(),
                normalize_path(request.destination.path),
                self.canonical_query(request=request),
            )
        )
        logger.debug("String to sign:\n%s", string_to_sign)
        return string_to_sign

    def signature(self, *, secret_key: str, string_to_sign: str) -> str:
        return base64_digest(hmac_sha256(secret_key.encode(), string_to_sign))

    def _merge_query(self, request: AWSRequest, params: dict[str, str]) -> None:
        merged = {**parse_query(request.destination.query), **params}
        request.destination = request.destination.with_changes(
            query=canonical_query_string(merged)
        )


class SigV3Signer(BaseSigner):
    """Request signer for AWS Signature Version 3 (``AWS3-HTTPS``).

    Only the request timestamp is signed. Prefer :py:class:`SigV4Signer` for
    services that support it.
    """

    def sign(
        self, *, request: AWSRequest, identity: AWSCredentialsIdentity
    ) -> AWSRequest:
        self._validate_identity(identity=identity)
        self._apply_security_token(request=request, identity=identity)
        self.prepare(request=request)

        string_to_sign = self.string_to_sign(request=request)
        signature = self.signature(
            secret_key=identity.secret_access_key, string_to_sign=string_to_sign
        )
        request.fields.set_field(
            self.generate_authorization_field(
                access_key_id=identity.access_key_id, signature=signature
            )
        )
        return request

    def prepare(self, *, request: AWSRequest) -> AWSRequest:
        timestamp = format_datetime(_now(), usegmt=True)
        request.fields.setdefault("Content-Type", DEFAULT_CONTENT_TYPE)
        date = request.fields.setdefault("Date", timestamp)
        request.fields.setdefault("X-Amz-Date", date)
        return request

    def string_to_sign(self, *, request: AWSRequest) -> str:
        timestamp = request.fields.value_of("X-Amz-Date")
        if not timestamp:
            raise MissingExpectedParameterException(
                "Cannot generate string_to_sign without an X-Amz-Date field "
                "on the request. Call prepare first."
            )
        return timestamp

    def signature(self, *, secret_key: str, string_to_sign: str) -> str:
        return base64_digest(hmac_sha256(secret_key.encode(), string_to_sign))

    def generate_authorization_field(
        self, *, access_key_id: str, signature: str
    ) -> Field:
        auth_str = (
            f"AWS3-HTTPS AWSAccessKeyId={access_key_id}, "
            f"Algorithm=HmacSHA256, Signature={signature}"
        )
        return Field(name="X-Amzn-Authorization", values=[auth_str])


class S3Signer(BaseSigner):
    """Request signer for the Amazon S3 custom HTTP authentication scheme.

    See https://docs.aws.amazon.com/AmazonS3/latest/userguide/RESTAuthentication.html
    """

    def sign(
        self, *, request: AWSRequest, identity: AWSCredentialsIdentity
    ) -> AWSRequest:
        self._validate_identity(identity=identity)
        self._apply_security_token(request=request, identity=identity)
        self.prepare(request=request)

        string_to_sign = self.string_to_sign(request=request)
        signature = self.signature(
            secret_key=identity.secret_access_key, string_to_sign=string_to_sign
        )
        request.fields.set_value(
            "Authorization", f"AWS {identity.access_key_id}:{signature}"
        )
        return request

    def prepare(self, *, request: AWSRequest) -> AWSRequest:
        request.fields.setdefault("Date", format_datetime(_now()))
        if not request.destination.path:
            request.destination = request.destination.with_changes(path="/")
        return request

    def canonical_amz_headers(
        self, *, request: AWSRequest, extra: dict[str, str] | None = None
    ) -> str:
        """Build the CanonicalizedAmzHeaders element.

        Every field whose name starts with ``x-amz`` is included, lowercased and
        sorted, one ``name:value`` line each.

        :param request: The request whose fields are canonicalized.
        :param extra: Additional amz headers that are signed but not sent as fields.
        """
        headers = {
            field.name.strip().lower(): field.as_string()
            for field in request.fields
            if field.name.strip().lower().startswith(S3_AMZ_HEADER_PREFIX)
        }
        headers.update(extra or {})
        lines = []
        for name in sorted(headers):
            value = headers[name].replace("\n", " ")
            lines.append(f"{name}:{value}\n")
        return "".join(lines)

    def canonical_resource(self, *, request: AWSRequest) -> str:
        """Build the CanonicalizedResource element.

        Virtual-hosted-style requests are prefixed with their bucket name, and a
        query string starting with a known sub-resource appends it to the path.
        """
        resource = ""
        if is_virtual_hosted_s3(request.host):
            resource += f"/{bucket_from_host(request.host)}"
        resource += request.destination.path or "/"

        query = request.destination.query or ""
        for subresource in S3_SUBRESOURCES:
            if query.startswith(subresource):
                resource += f"?{subresource}"
        return resource

    def string_to_sign(
        self,
        *,
        request: AWSRequest,
        date: str | None = None,
        extra_amz_headers: dict[str, str] | None = None,
    ) -> str:
        """Build the string to sign.

        :param request: A prepared request.
        :param date: Replaces the ``Date`` field value, used for the expiry of
            presigned URLs.
        :param extra_amz_headers: Passed through to ``canonical_amz_headers``.
        """
        if date is None:
            date = request.fields.value_of("Date")
        # Content-MD5 is never computed, its line is left empty.
        content_md5 = ""
        string_to_sign = (
            f"{request.method.upper()}\n"
            f"{content_md5}\n"
            f"{request.fields.value_of('Content-Type')}\n"
            f"{date}\n"
            f"{self.canonical_amz_headers(request=request, extra=extra_amz_headers)}"
            f"{self.canonical_resource(request=request)}"
        )
        logger.debug("String to sign:\n%s", string_to_sign)
        return string_to_sign

    def signature(self, *, secret_key: str, string_to_sign: str) -> str:
        return base64_digest(hmac_sha1(secret_key.encode(), string_to_sign))


class S3QuerySigner(S3Signer):
    """Generates presigned S3 requests.

    The signature, access key and expiry are carried in the query string instead of
    request fields, so the resulting URL can be handed to other clients.
    """

    DEFAULT_EXPIRES = 3600
    _PRESIGN_PARAMS = frozenset(
        ("AWSAccessKeyId", "Expires", "Signature", "x-amz-security-token")
    )

    def __init__(self, expires_in: int = DEFAULT_EXPIRES) -> None:
        """:param expires_in: Seconds until a presigned request expires."""
        self._expires_in = expires_in

    def sign(
        self,
        *,
        request: AWSRequest,
        identity: AWSCredentialsIdentity,
        expires: datetime.datetime | None = None,
    ) -> AWSRequest:
        """Presign ``request`` in place.

        :param request: The request to presign.
        :param identity: Credentials to sign with.
        :param expires: When the presigned request expires, naive values are read
            as UTC. Defaults to ``expires_in`` seconds from now.
        """
        self._validate_identity(identity=identity)
        if expires is None:
            expires = _now() + datetime.timedelta(seconds=self._expires_in)
        epoch = str(int(ensure_utc(expires).timestamp()))

        self._strip_presign_params(request)
        if not request.destination.path:
            request.destination = request.destination.with_changes(path="/")

        amz_headers: dict[str, str] = {}
        if identity.session_token:
            amz_headers["x-amz-security-token"] = identity.session_token
        string_to_sign = self.string_to_sign(
            request=request, date=epoch, extra_amz_headers=amz_headers
        )
        signature = self.signature(
            secret_key=identity.secret_access_key, string_to_sign=string_to_sign
        )

        params = {
            "AWSAccessKeyId": identity.access_key_id,
            "Expires": epoch,
            "Signature": signature,
            **amz_headers,
        }
        new_query = urlencode(params, safe="", quote_via=quote)
        if request.destination.query:
            new_query = f"{request.destination.query}&{new_query}"
        request.destination = request.destination.with_changes(query=new_query)
        return request

    def _strip_presign_params(self, request: AWSRequest) -> None:
        if not request.destination.query:
            return
        kept = [
            part
            for part in request.destination.query.split("&")
            if part and part.split("=", 1)[0] not in self._PRESIGN_PARAMS
        ]
        request.destination = request.destination.with_changes(
            query="&".join(kept) or None
        )
