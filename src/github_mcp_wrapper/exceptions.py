"""Exception hierarchy for github_mcp_wrapper.

All exceptions inherit from :class:`WrapperError`, which carries an
``exit_code`` attribute and a list of remediation ``hints``.  The command in
:mod:`github_mcp_wrapper.app` catches ``WrapperError``, prints the message
and every hint to stderr, and exits with the error's code.  Unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

None of these errors are retried; each ends the invocation.

Subclass hierarchy::

    WrapperError (exit 1)
    +-- InvalidUsageError (exit 2)
    +-- ConfigError
    +-- CredentialError
    |   +-- CredentialNotFoundError
    |   +-- CredentialTooShortError
    |   +-- CredentialRejectedError
    |   +-- ValidationNetworkError
    +-- ServerError
    |   +-- ServerNotFoundError
    |   +-- ServerPathInvalidError
    |   +-- UnsupportedCandidateError
    |   +-- MissingRuntimeError
    +-- ChildError
        +-- ChildSpawnError
        +-- ChildSignalTermination (exit 128 + signum)
"""

from __future__ import annotations

from github_mcp_wrapper.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SIGNAL_BASE,
)


class WrapperError(Exception):
    """Base exception for all wrapper errors.

    Args:
        message: Human-readable error description printed to stderr.
        hints: Remediation lines printed after the message.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        hints: list[str] | None = None,
        exit_code: int | None = None,
    ):
        super().__init__(message)
        self.hints = list(hints or [])
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(WrapperError):
    """Raised for command-line arguments the wrapper does not accept."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(WrapperError):
    """Raised for an unreadable config file or an invalid setting value."""


# --- Credentials ---


class CredentialError(WrapperError):
    """Base class for credential resolution and validation failures."""


class CredentialNotFoundError(CredentialError):
    """Raised when no source in the resolution chain yields a token."""


class CredentialTooShortError(CredentialError):
    """Raised when a token is too short to be plausible. No request is made."""


class CredentialRejectedError(CredentialError):
    """Raised when the API answers but does not accept the token."""


class ValidationNetworkError(CredentialError):
    """Raised on a transport failure or timeout while validating a token."""


# --- Server location ---


class ServerError(WrapperError):
    """Base class for server location and dispatch failures."""


class ServerNotFoundError(ServerError):
    """Raised when every executable candidate has been exhausted."""


class ServerPathInvalidError(ServerError):
    """Raised when an explicitly supplied server path does not exist."""


class UnsupportedCandidateError(ServerError):
    """Raised when a located candidate cannot be launched in any known way."""


class MissingRuntimeError(ServerError):
    """Raised when the runtime a candidate needs (``go``, ``node``) is absent."""


# --- Child process ---


class ChildError(WrapperError):
    """Base class for failures of the supervised child process."""


class ChildSpawnError(ChildError):
    """Raised when the child process could not be started at all."""


class ChildSignalTermination(ChildError):
    """Raised when the child was terminated by a signal.

    The exit code follows the shell convention of ``128 + signum``.

    Args:
        signum: The signal number reported by the operating system.
        signal_name: Printable signal name such as ``"SIGTERM"``.
    """

    def __init__(self, signum: int, signal_name: str):
        super().__init__(
            f"MCP server terminated by signal {signal_name}",
            exit_code=EXIT_SIGNAL_BASE + signum,
        )
        self.signum = signum
        self.signal_name = signal_name
