# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import base64
import hmac
from hashlib import md5, sha1, sha256


def hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key=key, msg=message.encode(), digestmod=sha256).digest()


def hmac_sha1(key: bytes, message: str) -> bytes:
    return hmac.new(key=key, msg=message.encode(), digestmod=sha1).digest()


def sha256_hex(content: bytes | str) -> str:
    """Lowercase hex SHA-256 digest of ``content``, UTF-8 encoding strings."""
    if isinstance(content, str):
        content = content.encode()
    return sha256(content).hexdigest()


def md5_base64(content: bytes) -> str:
    """Base64 encoded MD5 digest, the format of the ``Content-MD5`` header."""
    return base64_digest(md5(content).digest())


def base64_digest(digest: bytes) -> str:
    return base64.b64encode(digest).decode()
