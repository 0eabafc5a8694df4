# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""AWS Request Signers computes AWS authentication signatures for outbound HTTP
requests: Signature Version 2, 3 and 4, and the Amazon S3 HMAC scheme."""

from __future__ import annotations

from ._http import AWSRequest, Field, Fields, URI
from ._identity import AWSCredentialIdentity
from .auth import SIGNATURE_VERSIONS, RequestSigner, SignatureVersion, sign
from .endpoints import service_and_region
from .signers import (
    S3QuerySigner,
    S3Signer,
    SigningMetadata,
    SigV2Signer,
    SigV3Signer,
    SigV4Signer,
    SigV4SigningProperties,
)

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "SIGNATURE_VERSIONS",
    "URI",
    "AWSCredentialIdentity",
    "AWSRequest",
    "Field",
    "Fields",
    "RequestSigner",
    "S3QuerySigner",
    "S3Signer",
    "SigV2Signer",
    "SigV3Signer",
    "SigV4Signer",
    "SigV4SigningProperties",
    "SignatureVersion",
    "SigningMetadata",
    "service_and_region",
    "sign",
)
