"""Credential resolver -- runs readers in strict priority order.

The :class:`CredentialResolver` holds an ordered list of
:class:`~github_mcp_wrapper.auth.base.CredentialReader` instances and
returns the first credential any of them produces.  Lower-priority readers
are never consulted once a higher one succeeds.

For normal use, call :func:`create_default_resolver` to get the standard
chain::

    explicit --token value
      -> gh auth token
      -> $GITHUB_TOKEN, $GITHUB_PERSONAL_ACCESS_TOKEN, $GH_TOKEN
      -> ~/.config/gh/hosts.yml
      -> ~/.github_token
      -> ~/.config/github/token
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from github_mcp_wrapper.auth.base import CredentialReader, is_absent
from github_mcp_wrapper.auth.gh_cli import GhCliReader
from github_mcp_wrapper.auth.readers import (
    EnvironmentReader,
    HostsFileReader,
    TokenFileReader,
    default_hosts_file,
    default_token_files,
)
from github_mcp_wrapper.exceptions import CredentialNotFoundError
from github_mcp_wrapper.models import (
    Credential,
    CredentialSource,
    CredentialSourceKind,
    WrapperSettings,
)
from github_mcp_wrapper.output import info

NOT_FOUND_HINTS = [
    "Please ensure one of the following:",
    "1. GitHub CLI is installed and authenticated (gh auth login)",
    "2. Set GITHUB_TOKEN environment variable",
    "3. Set GITHUB_PERSONAL_ACCESS_TOKEN (or GH_TOKEN) environment variable",
    "4. Use --token flag to provide token directly",
]


class CredentialResolver:
    """Try each reader in order and return the first credential found.

    Args:
        readers: Readers in priority order, highest first.

    Example::

        resolver = CredentialResolver([EnvironmentReader(), TokenFileReader(path)])
        credential = resolver.resolve()
    """

    def __init__(self, readers: Sequence[CredentialReader]) -> None:
        self._readers = list(readers)

    @property
    def readers(self) -> list[CredentialReader]:
        return list(self._readers)

    def resolve(self, explicit: Optional[str] = None) -> Credential:
        """Resolve a credential.

        Args:
            explicit: A token supplied directly by the caller.  When present
                it is returned immediately and no reader is consulted.

        Returns:
            The first :class:`~github_mcp_wrapper.models.Credential` found.

        Raises:
            CredentialNotFoundError: If no reader yields a token.  The error's
                ``hints`` list the remediation options for the user.
        """
        if not is_absent(explicit):
            return Credential(
                value=explicit.strip(),
                source=CredentialSource(kind=CredentialSourceKind.EXPLICIT),
            )

        for reader in self._readers:
            credential = reader.read()
            if credential is not None and not is_absent(credential.secret()):
                info(f"Successfully retrieved token from {credential.source.describe()}")
                return credential

        raise CredentialNotFoundError("Failed to obtain GitHub token", hints=NOT_FOUND_HINTS)


def create_default_resolver(
    settings: WrapperSettings, home: Optional[Path] = None
) -> CredentialResolver:
    """Create a :class:`CredentialResolver` with the standard reader chain.

    Args:
        settings: Effective settings; ``github_host`` selects the block in
            the hosts file.
        home: Home directory to look for token files in.  Defaults to
            :meth:`pathlib.Path.home`.
    """
    home = Path.home() if home is None else home
    readers: list[CredentialReader] = [
        GhCliReader(),
        EnvironmentReader(),
        HostsFileReader(default_hosts_file(home), host=settings.github_host),
    ]
    readers.extend(TokenFileReader(path) for path in default_token_files(home))
    return CredentialResolver(readers)
