# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from aws_request_signers._crypto import (
    base64_digest,
    hmac_sha1,
    hmac_sha256,
    md5_base64,
    sha256_hex,
)

KEY = b"asdf1234"
MESSAGE = "SmartyStreets was here"


def test_hmac_sha256() -> None:
    expected = bytes(
        [
            65, 46, 186, 78, 2, 155, 71, 104, 49, 37, 5, 66, 195, 129, 159, 227,
            239, 53, 240, 107, 83, 21, 235, 198, 238, 216, 108, 149, 143, 222, 144, 94,
        ]
    )  # fmt: skip
    assert hmac_sha256(KEY, MESSAGE) == expected


def test_hmac_sha1() -> None:
    expected = bytes(
        [
            164, 77, 252, 0, 87, 109, 207, 110, 163, 75,
            228, 122, 83, 255, 233, 237, 125, 206, 85, 70,
        ]
    )  # fmt: skip
    assert hmac_sha1(KEY, MESSAGE) == expected


def test_sha256_hex() -> None:
    expected = "5c81a4ef1172e89b1a9d575f4cd82f4ed20ea9137e61aa7f1ab936291d24e79a"
    assert sha256_hex("This is... Sparta!!") == expected
    assert sha256_hex(b"This is... Sparta!!") == expected


def test_sha256_hex_empty() -> None:
    assert (
        sha256_hex(b"")
        == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_md5_base64() -> None:
    assert md5_base64(b"") == "1B2M2Y8AsgTpgAmY7PhCfg=="


def test_base64_digest() -> None:
    assert base64_digest(b"\x00\x01\x02") == "AAEC"
