"""GitHub CLI (``gh``) integration.

Two commands are used:

- ``gh auth token`` prints the token of the active account.  Its output is
  the highest-priority automatic credential source.
- ``gh auth status`` is run once at startup purely to tell the user whether
  ``gh`` is set up; it never changes the outcome of resolution.

Both are run with captured output so nothing leaks onto the wrapper's
stdout, which belongs to the MCP server.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Optional

from github_mcp_wrapper.auth.base import CredentialReader, is_absent
from github_mcp_wrapper.models import Credential, CredentialSource, CredentialSourceKind
from github_mcp_wrapper.output import debug, warning

GH_BINARY = "gh"
_GH_TIMEOUT = 15


def _run_gh(*args: str) -> Optional[subprocess.CompletedProcess[str]]:
    """Run ``gh <args>`` and return the completed process.

    Returns ``None`` when ``gh`` is not installed or does not answer in time.
    """
    executable = shutil.which(GH_BINARY)
    if executable is None:
        return None
    try:
        return subprocess.run(
            [executable, *args],
            capture_output=True,
            text=True,
            timeout=_GH_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        debug(f"gh {' '.join(args)} failed: {exc}")
        return None


def check_gh_auth_status() -> bool:
    """Report whether the GitHub CLI is installed and logged in.

    Only emits diagnostics; callers continue regardless of the result.

    Returns:
        ``True`` if ``gh auth status`` succeeded.
    """
    result = _run_gh("auth", "status")
    if result is None:
        warning("GitHub CLI not found - will try other authentication methods")
        return False
    if result.returncode != 0:
        warning("GitHub CLI is installed but not authenticated")
        warning("Consider running 'gh auth login' for seamless authentication")
        return False
    debug("GitHub CLI authentication verified")
    return True


class GhCliReader(CredentialReader):
    """Read the active token from ``gh auth token``."""

    @property
    def label(self) -> str:
        return "GitHub CLI"

    def read(self) -> Optional[Credential]:
        debug("Attempting to get token from GitHub CLI...")
        result = _run_gh("auth", "token")
        if result is None:
            debug("GitHub CLI (gh) not found in PATH")
            return None
        token = result.stdout.strip()
        if result.returncode != 0 or is_absent(token):
            debug("GitHub CLI is installed but no valid token found")
            return None
        return Credential(
            value=token,
            source=CredentialSource(kind=CredentialSourceKind.CLI_HELPER),
        )
