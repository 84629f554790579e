"""Canonical Pydantic models shared across all github_mcp_wrapper modules.

The models fall into two groups:

**Configuration** -- :class:`WrapperSettings`, built once per invocation by
:func:`~github_mcp_wrapper.config.resolve_settings` and passed explicitly to
every stage of the pipeline.

**Pipeline values** -- :class:`CredentialSource`, :class:`Credential`, and
:class:`ExecutableCandidate`, the results handed from one stage to the next.
None of them outlive the invocation.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "info"
DEFAULT_GITHUB_HOST = "github.com"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_VALIDATE_TIMEOUT = 10.0

MANAGED_RUNTIME_MODULE = "github.com/github/github-mcp-server/cmd/github-mcp-server@latest"
"""Go module reference for GitHub's official MCP server, run via ``go run``."""


# --- Settings ---


class WrapperSettings(BaseModel):
    """Effective configuration for one invocation.

    Example::

        WrapperSettings(port=3001, log_level="debug")
    """

    model_config = ConfigDict(extra="ignore")

    server_path: Optional[str] = Field(
        default=None, description="Explicit MCP server path (MCP_SERVER_PATH)"
    )
    port: int = Field(
        default=DEFAULT_PORT, ge=0, le=65535, description="Port passed to the server"
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL, description="LOG_LEVEL passed to the server"
    )
    github_host: str = Field(
        default=DEFAULT_GITHUB_HOST,
        description="Host block to read from the gh hosts file",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL, description="Base URL of the GitHub REST API"
    )
    validate_timeout: float = Field(
        default=DEFAULT_VALIDATE_TIMEOUT,
        gt=0,
        description="Timeout in seconds for the token validation request",
    )

    @field_validator("server_path")
    @classmethod
    def _blank_path_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        return value.strip().lower() or DEFAULT_LOG_LEVEL

    @property
    def is_debug(self) -> bool:
        return self.log_level == "debug"


# --- Credentials ---


class CredentialSourceKind(str, enum.Enum):
    """Where a credential came from."""

    EXPLICIT = "explicit"
    CLI_HELPER = "cli_helper"
    ENVIRONMENT_VARIABLE = "environment_variable"
    CONFIG_FILE = "config_file"


class CredentialFileFormat(str, enum.Enum):
    HOSTS = "hosts"
    PLAIN = "plain"


class CredentialSource(BaseModel):
    """Provenance of a :class:`Credential`, used for logging only.

    Attributes:
        kind: Which kind of source produced the credential.
        name: Environment variable name for ``ENVIRONMENT_VARIABLE`` sources.
        path: File path for ``CONFIG_FILE`` sources.
        format: File format for ``CONFIG_FILE`` sources.
    """

    kind: CredentialSourceKind
    name: Optional[str] = None
    path: Optional[Path] = None
    format: Optional[CredentialFileFormat] = None

    def describe(self) -> str:
        """Return a short human-readable label such as ``$GITHUB_TOKEN``."""
        if self.kind == CredentialSourceKind.EXPLICIT:
            return "--token flag"
        if self.kind == CredentialSourceKind.CLI_HELPER:
            return "GitHub CLI"
        if self.kind == CredentialSourceKind.ENVIRONMENT_VARIABLE:
            return f"${self.name}"
        return str(self.path)


class Credential(BaseModel):
    """An opaque GitHub token together with its provenance.

    The value is held as a :class:`~pydantic.SecretStr` so that it never
    appears in ``repr()`` or log output.  Use :meth:`secret` at the single
    point where the raw value is needed.
    """

    value: SecretStr
    source: CredentialSource

    @field_validator("value")
    @classmethod
    def _non_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("credential must not be empty")
        return value

    def secret(self) -> str:
        return self.value.get_secret_value()

    def masked(self) -> str:
        """Return the first four characters followed by ``...``."""
        raw = self.secret()
        return f"{raw[:4]}..." if len(raw) > 8 else "****"

    def __len__(self) -> int:
        return len(self.secret())


# --- Executable candidates ---


class CandidateKind(str, enum.Enum):
    """How a server candidate was found and therefore how it is launched."""

    CONFIGURED_OVERRIDE = "configured_override"
    MANAGED_RUNTIME = "managed_runtime"
    RESOLVED_PATH = "resolved_path"


class ExecutableCandidate(BaseModel):
    """A located MCP server.

    Attributes:
        kind: How the candidate was produced.
        target: A filesystem path, or the Go module reference for
            ``MANAGED_RUNTIME`` candidates.
    """

    kind: CandidateKind
    target: str

    @property
    def is_managed_runtime(self) -> bool:
        return self.kind == CandidateKind.MANAGED_RUNTIME or is_managed_runtime_marker(
            self.target
        )


def is_managed_runtime_marker(target: str) -> bool:
    """Return ``True`` if *target* names the official Go server module."""
    return "github.com/github/github-mcp-server" in target
