# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class AWSSDKWarning(UserWarning): ...


class BaseAWSSDKException(Exception):
    """Top-level exception to capture signer-related errors."""


class MissingExpectedParameterException(BaseAWSSDKException, ValueError):
    """Some signing steps require specific request fields to be present."""


class MissingCredentialsError(BaseAWSSDKException):
    """No credentials could be resolved from any configured source."""


class UnknownServiceError(BaseAWSSDKException, KeyError):
    """The target service has no known signature version."""

    def __init__(self, service: str) -> None:
        super().__init__(service)
        self.service = service

    def __str__(self) -> str:
        return f"No signature version is registered for service {self.service!r}."
