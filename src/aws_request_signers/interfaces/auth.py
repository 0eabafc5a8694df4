# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Protocol, TypeVar

from .http import Request
from .identity import AWSCredentialsIdentity

R = TypeVar("R", bound=Request)


class Signer(Protocol[R]):
    """A signing scheme that applies authentication data to a request in place."""

    def sign(self, *, request: R, identity: AWSCredentialsIdentity) -> R:
        """Sign ``request`` with ``identity``.

        :param request: The request to sign. It is mutated and returned, not copied.
        :param identity: Resolved credentials to sign with.
        """
        ...
