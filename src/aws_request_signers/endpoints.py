# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Classify AWS endpoint hostnames into the service and region they address.

See https://docs.aws.amazon.com/general/latest/gr/rande.html for the hostname
layouts handled here.
"""

DEFAULT_REGION = "us-east-1"
DEFAULT_SERVICE = "s3"

S3_SERVICE = "s3"
S3_REGION_PREFIX = "s3-"
API_GATEWAY_SERVICE = "execute-api"

# Hostnames such as ``s3-external-1.amazonaws.com`` name this legacy alias.
_LEGACY_REGION_ALIASES = {"external-1": DEFAULT_REGION}


def service_and_region(host: str) -> tuple[str, str]:
    """Find the service and region an AWS hostname targets.

    Any port suffix should be stripped by the caller. Hostnames that don't follow a
    known layout resolve to ``(DEFAULT_SERVICE, DEFAULT_REGION)`` rather than
    raising.

    :param host: A dot separated hostname, for example ``sqs.us-west-2.amazonaws.com``.
    """
    service, region = _classify(host.split("."))
    region = _LEGACY_REGION_ALIASES.get(region, region)
    return service or DEFAULT_SERVICE, region or DEFAULT_REGION


def _classify(labels: list[str]) -> tuple[str, str]:
    if len(labels) == 4:
        # service.region.amazonaws.com, bucket.s3.amazonaws.com,
        # or bucket.s3-region.amazonaws.com
        if labels[1] == S3_SERVICE:
            return S3_SERVICE, DEFAULT_REGION
        if labels[1].startswith(S3_REGION_PREFIX):
            return S3_SERVICE, labels[1][len(S3_REGION_PREFIX) :]
        return labels[0], labels[1]

    if len(labels) == 5:
        # API Gateway: 1234abcd56.execute-api.us-east-1.amazonaws.com
        if labels[1] == API_GATEWAY_SERVICE:
            return labels[1], labels[2]
        # domain.region.service.amazonaws.com, e.g. Elasticsearch
        return labels[2], labels[1]

    # service.amazonaws.com or s3-region.amazonaws.com
    if labels[0].startswith(S3_REGION_PREFIX):
        return S3_SERVICE, labels[0][len(S3_REGION_PREFIX) :]
    return labels[0], DEFAULT_REGION


def is_virtual_hosted_s3(host: str) -> bool:
    """Whether ``host`` addresses an S3 bucket as a subdomain, for example
    ``johnsmith.s3.amazonaws.com``."""
    service, _ = service_and_region(host)
    return service == S3_SERVICE and host.count(".") == 3


def bucket_from_host(host: str) -> str:
    """The bucket name of a virtual-hosted-style S3 hostname."""
    return host.split(".", 1)[0]
