# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest
from aws_request_signers.endpoints import (
    bucket_from_host,
    is_virtual_hosted_s3,
    service_and_region,
)


@pytest.mark.parametrize(
    "host,expected",
    [
        ("sqs.us-west-2.amazonaws.com", ("sqs", "us-west-2")),
        ("iam.amazonaws.com", ("iam", "us-east-1")),
        ("bucketname.s3.amazonaws.com", ("s3", "us-east-1")),
        ("bucketname.s3-us-west-1.amazonaws.com", ("s3", "us-west-1")),
        ("s3.amazonaws.com", ("s3", "us-east-1")),
        ("s3-us-west-1.amazonaws.com", ("s3", "us-west-1")),
        ("s3-external-1.amazonaws.com", ("s3", "us-east-1")),
        ("abc.execute-api.us-east-1.amazonaws.com", ("execute-api", "us-east-1")),
        ("search-domain.us-west-2.es.amazonaws.com", ("es", "us-west-2")),
        ("email.us-east-1.amazonaws.com", ("email", "us-east-1")),
        ("localhost", ("localhost", "us-east-1")),
    ],
)
def test_service_and_region(host: str, expected: tuple[str, str]) -> None:
    assert service_and_region(host) == expected


@pytest.mark.parametrize(
    "host",
    ["", ".", "....", "s3-", "a.b.c.d.e.f.g", "..s3..", "ümlaut.example", "-.-"],
)
def test_service_and_region_never_fails(host: str) -> None:
    service, region = service_and_region(host)
    assert service
    assert region


@pytest.mark.parametrize(
    "host,expected",
    [
        ("johnsmith.s3.amazonaws.com", True),
        ("johnsmith.s3-us-west-1.amazonaws.com", True),
        ("s3.amazonaws.com", False),
        ("s3-us-west-1.amazonaws.com", False),
        ("sqs.us-west-2.amazonaws.com", False),
    ],
)
def test_is_virtual_hosted_s3(host: str, expected: bool) -> None:
    assert is_virtual_hosted_s3(host) is expected


def test_bucket_from_host() -> None:
    assert bucket_from_host("johnsmith.s3.amazonaws.com") == "johnsmith"
