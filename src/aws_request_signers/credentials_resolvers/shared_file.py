#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import configparser
import os
from pathlib import Path

from .._identity import AWSCredentialIdentity
from ..exceptions import MissingCredentialsError
from .interfaces import CredentialsResolver

DEFAULT_PROFILE = "default"


class SharedCredentialsFileResolver(CredentialsResolver):
    """Resolves AWS Credentials from the shared credentials file.

    The file is an INI file with one section per profile, for example::

        [default]
        aws_access_key_id = AKIDEXAMPLE
        aws_secret_access_key = wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY
        aws_session_token = optional-token
    """

    def __init__(
        self, *, path: str | Path | None = None, profile: str | None = None
    ) -> None:
        """
        :param path: Location of the credentials file. Defaults to
            ``AWS_SHARED_CREDENTIALS_FILE`` or ``~/.aws/credentials``.
        :param profile: Section to read. Defaults to ``AWS_PROFILE`` or ``default``.
        """
        self._path = path
        self._profile = profile

    def _resolve_path(self) -> Path:
        if self._path is not None:
            return Path(self._path)
        if env_path := os.getenv("AWS_SHARED_CREDENTIALS_FILE"):
            return Path(env_path).expanduser()
        return Path("~", ".aws", "credentials").expanduser()

    def _resolve_profile(self) -> str:
        return self._profile or os.getenv("AWS_PROFILE") or DEFAULT_PROFILE

    def get_identity(self) -> AWSCredentialIdentity:
        path = self._resolve_path()
        profile = self._resolve_profile()

        parser = configparser.ConfigParser(interpolation=None)
        try:
            read = parser.read(path, encoding="utf-8")
        except configparser.Error as e:
            raise MissingCredentialsError(
                f"Failed to parse shared credentials file {path}: {e}"
            ) from e
        if not read:
            raise MissingCredentialsError(
                f"Shared credentials file {path} does not exist or is unreadable."
            )
        if not parser.has_section(profile):
            raise MissingCredentialsError(
                f"Profile {profile!r} not found in shared credentials file {path}."
            )

        section = parser[profile]
        access_key_id = section.get("aws_access_key_id")
        secret_access_key = section.get("aws_secret_access_key")
        if not access_key_id:
            raise MissingCredentialsError(
                f"Shared credentials profile {profile!r} in {path} did not "
                "contain aws_access_key_id"
            )
        if not secret_access_key:
            raise MissingCredentialsError(
                f"Shared credentials profile {profile!r} in {path} did not "
                "contain aws_secret_access_key"
            )

        return AWSCredentialIdentity(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=section.get("aws_session_token") or None,
        )
