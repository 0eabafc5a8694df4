#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import os

from .._identity import AWSCredentialIdentity
from ..exceptions import MissingCredentialsError
from .interfaces import CredentialsResolver


def _getenv(*names: str) -> str | None:
    # The first non-empty variable wins; later names are legacy spellings.
    for name in names:
        if value := os.getenv(name):
            return value
    return None


class EnvironmentCredentialsResolver(CredentialsResolver):
    """Resolves AWS Credentials from system environment variables."""

    def get_identity(self) -> AWSCredentialIdentity:
        access_key_id = _getenv("AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY")
        secret_access_key = _getenv("AWS_SECRET_ACCESS_KEY", "AWS_SECRET_KEY")
        session_token = _getenv("AWS_SESSION_TOKEN", "AWS_SECURITY_TOKEN")

        if access_key_id is None or secret_access_key is None:
            raise MissingCredentialsError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY are required"
            )

        return AWSCredentialIdentity(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
        )
