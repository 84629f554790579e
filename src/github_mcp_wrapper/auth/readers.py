"""Environment-variable and file credential readers.

:class:`EnvironmentReader` checks a fixed, ordered list of variable names.
:class:`HostsFileReader` and :class:`TokenFileReader` read the GitHub CLI
hosts file and plain-text token files respectively.  A file that is missing
or holds no token is skipped silently; one that cannot be reached or read
(for example behind an unsearchable directory) is skipped with a warning.
"""

from __future__ import annotations

import os
from abc import abstractmethod
from pathlib import Path
from typing import Mapping, Optional, Sequence

from github_mcp_wrapper.auth.base import CredentialReader, is_absent
from github_mcp_wrapper.auth.hosts_file import find_oauth_token
from github_mcp_wrapper.models import (
    Credential,
    CredentialFileFormat,
    CredentialSource,
    CredentialSourceKind,
    DEFAULT_GITHUB_HOST,
)
from github_mcp_wrapper.output import debug, warning

TOKEN_ENV_VARS: tuple[str, ...] = (
    "GITHUB_TOKEN",
    "GITHUB_PERSONAL_ACCESS_TOKEN",
    "GH_TOKEN",
)
"""Credential variables, highest priority first."""


def default_hosts_file(home: Path) -> Path:
    return home / ".config" / "gh" / "hosts.yml"


def default_token_files(home: Path) -> list[Path]:
    return [home / ".github_token", home / ".config" / "github" / "token"]


class EnvironmentReader(CredentialReader):
    """Return the first non-empty variable among *names*.

    Args:
        names: Variable names in priority order.
        environ: Mapping to read from; defaults to ``os.environ`` at read time.
    """

    def __init__(
        self,
        names: Sequence[str] = TOKEN_ENV_VARS,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._names = tuple(names)
        self._environ = environ

    @property
    def label(self) -> str:
        return "environment variables " + ", ".join(self._names)

    def read(self) -> Optional[Credential]:
        environ = os.environ if self._environ is None else self._environ
        debug("Checking environment variables...")
        for name in self._names:
            value = environ.get(name)
            if is_absent(value):
                continue
            debug(f"Found {name} environment variable")
            return Credential(
                value=value.strip(),
                source=CredentialSource(
                    kind=CredentialSourceKind.ENVIRONMENT_VARIABLE, name=name
                ),
            )
        return None


class _FileReader(CredentialReader):
    """Shared existence and read handling for file-backed readers."""

    file_format: CredentialFileFormat

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def label(self) -> str:
        return str(self._path)

    @abstractmethod
    def _extract(self, content: str) -> Optional[str]:
        """Return the token held in *content*, if any."""
        ...

    def read(self) -> Optional[Credential]:
        try:
            if not self._path.is_file():
                return None
            debug(f"Checking token file: {self._path}")
            content = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            warning(f"Failed to read {self._path}: {exc}")
            return None

        token = self._extract(content)
        if is_absent(token):
            debug(f"No token found in {self._path}")
            return None
        return Credential(
            value=token.strip(),
            source=CredentialSource(
                kind=CredentialSourceKind.CONFIG_FILE,
                path=self._path,
                format=self.file_format,
            ),
        )


class HostsFileReader(_FileReader):
    """Read ``oauth_token`` for one host from the ``gh`` hosts file.

    Args:
        path: Location of ``hosts.yml``.
        host: Host block to look in.
    """

    file_format = CredentialFileFormat.HOSTS

    def __init__(self, path: Path, host: str = DEFAULT_GITHUB_HOST) -> None:
        super().__init__(path)
        self._host = host

    def _extract(self, content: str) -> Optional[str]:
        return find_oauth_token(content.splitlines(), self._host)


class TokenFileReader(_FileReader):
    """Read a plain-text file whose trimmed content is the token."""

    file_format = CredentialFileFormat.PLAIN

    def _extract(self, content: str) -> Optional[str]:
        return content.strip()
