#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from .chain import ChainedCredentialsResolver, create_default_chain
from .environment import EnvironmentCredentialsResolver
from .interfaces import CredentialsResolver
from .shared_file import SharedCredentialsFileResolver
from .static import StaticCredentialsResolver

__all__ = (
    "ChainedCredentialsResolver",
    "CredentialsResolver",
    "EnvironmentCredentialsResolver",
    "SharedCredentialsFileResolver",
    "StaticCredentialsResolver",
    "create_default_chain",
)
