#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from typing import Protocol

from .._identity import AWSCredentialIdentity


class CredentialsResolver(Protocol):
    """Used to load AWS credentials from a given source."""

    def get_identity(self) -> AWSCredentialIdentity:
        """Load credentials from this resolver.

        :raises MissingCredentialsError: When this source has no credentials.
        """
        ...
