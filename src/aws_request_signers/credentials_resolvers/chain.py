#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import logging
import threading
from collections.abc import Sequence
from datetime import timedelta
from typing import Final

from .._identity import AWSCredentialIdentity
from ..exceptions import MissingCredentialsError
from .environment import EnvironmentCredentialsResolver
from .interfaces import CredentialsResolver
from .shared_file import SharedCredentialsFileResolver

logger: Final = logging.getLogger(__name__)

# Temporary credentials are resolved again this long before they expire.
DEFAULT_REFRESH_WINDOW: Final = timedelta(minutes=4)


class ChainedCredentialsResolver(CredentialsResolver):
    """Attempts to resolve credentials by checking a sequence of sub-resolvers.

    If a nested resolver raises a :py:class:`MissingCredentialsError`, the next
    resolver in the chain will be attempted. The first credentials found are cached
    and reused until they are within ``refresh_window`` of their expiration.
    """

    def __init__(
        self,
        resolvers: Sequence[CredentialsResolver],
        *,
        refresh_window: timedelta = DEFAULT_REFRESH_WINDOW,
    ) -> None:
        """Construct a ChainedCredentialsResolver.

        :param resolvers: The sequence of resolvers to resolve credentials from.
        :param refresh_window: How long before expiry cached credentials are
            resolved again.
        """
        self._resolvers = resolvers
        self._refresh_window = refresh_window
        self._cached: AWSCredentialIdentity | None = None
        self._lock = threading.Lock()

    def _is_fresh(self, credentials: AWSCredentialIdentity) -> bool:
        return not credentials.expires_within(self._refresh_window)

    def get_identity(self) -> AWSCredentialIdentity:
        cached = self._cached
        if cached is not None and self._is_fresh(cached):
            return cached

        with self._lock:
            # Another thread may have refreshed while this one waited.
            cached = self._cached
            if cached is None or not self._is_fresh(cached):
                cached = self._resolve()
                self._cached = cached
            return cached

    def _resolve(self) -> AWSCredentialIdentity:
        logger.debug("Attempting to resolve credentials from resolver chain.")
        for resolver in self._resolvers:
            try:
                logger.debug("Attempting to resolve credentials from %s.", type(resolver))
                return resolver.get_identity()
            except MissingCredentialsError as e:
                logger.debug(
                    "Failed to resolve credentials from %s: %s", type(resolver), e
                )

        raise MissingCredentialsError(
            "None of the configured credentials sources were able to resolve "
            "credentials."
        )


def create_default_chain() -> ChainedCredentialsResolver:
    """Creates the default credentials chain: environment variables, then the
    shared credentials file."""
    return ChainedCredentialsResolver(
        resolvers=(
            EnvironmentCredentialsResolver(),
            SharedCredentialsFileResolver(),
        )
    )
