"""Executable locator for the GitHub MCP server.

Candidates are tried most-specific first and the first usable one wins:

1. The explicit path (``--server`` or ``MCP_SERVER_PATH``).
2. GitHub's official Go server, if ``go`` is installed.  This is a module
   reference rather than a file and is accepted without a filesystem check;
   ``go run`` fetches it at launch time.
3. ``mcp-server-github`` on ``PATH``.
4. The two npm package layouts under ``npm root -g``.
5. Conventional user-local and project-local install paths.

Every path candidate must be an existing file.  The probes (``which`` and
``npm root -g``) are injectable so the search order can be tested without
touching the real machine.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterator, Optional

from github_mcp_wrapper.exceptions import ServerNotFoundError, ServerPathInvalidError
from github_mcp_wrapper.models import (
    MANAGED_RUNTIME_MODULE,
    CandidateKind,
    ExecutableCandidate,
    is_managed_runtime_marker,
)
from github_mcp_wrapper.output import debug, info

GO_BINARY = "go"
NPM_BINARY = "npm"
LEGACY_SERVER_NAME = "mcp-server-github"
NPM_PACKAGE_ENTRYPOINTS: tuple[tuple[str, ...], ...] = (
    ("@modelcontextprotocol", "server-github", "dist", "index.js"),
    ("mcp-server-github", "dist", "index.js"),
)

_NPM_TIMEOUT = 15

Which = Callable[[str], Optional[str]]


def npm_global_root(which: Which = shutil.which) -> Optional[str]:
    """Return the output of ``npm root -g``, or ``None`` if npm is unavailable.

    ``npm`` is resolved through *which* first so that ``npm.cmd`` is found on
    Windows.
    """
    npm = which(NPM_BINARY)
    if npm is None:
        return None
    try:
        result = subprocess.run(
            [npm, "root", "-g"],
            capture_output=True,
            text=True,
            timeout=_NPM_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        debug(f"npm root -g failed: {exc}")
        return None
    root = result.stdout.strip()
    if result.returncode != 0 or not root:
        return None
    return root


def conventional_paths(home: Path, cwd: Path) -> list[Path]:
    return [
        home / ".local" / "bin" / LEGACY_SERVER_NAME,
        home / ".npm-global" / "bin" / LEGACY_SERVER_NAME,
        cwd / "node_modules" / ".bin" / LEGACY_SERVER_NAME,
    ]


class ExecutableLocator:
    """Find the MCP server to supervise.

    Args:
        which: ``shutil.which``-compatible lookup.
        npm_root: Callable returning the npm global root or ``None``.
        home: Home directory for conventional paths.
        cwd: Project directory for ``node_modules/.bin``.
    """

    def __init__(
        self,
        which: Which = shutil.which,
        npm_root: Optional[Callable[[], Optional[str]]] = None,
        home: Optional[Path] = None,
        cwd: Optional[Path] = None,
    ) -> None:
        self._which = which
        self._npm_root = npm_root if npm_root is not None else (lambda: npm_global_root(which))
        self._home = home
        self._cwd = cwd

    def locate(self, explicit_path: Optional[str] = None) -> ExecutableCandidate:
        """Return the first usable candidate.

        Args:
            explicit_path: A path the caller insists on.  It is accepted if
                it is the Go module reference or an existing file; otherwise
                the search stops immediately.

        Raises:
            ServerPathInvalidError: If *explicit_path* is given but absent.
            ServerNotFoundError: If no candidate is usable.
        """
        if explicit_path:
            return self._check_explicit(explicit_path)

        for candidate in self._candidates():
            if candidate.kind == CandidateKind.MANAGED_RUNTIME:
                info("Found GitHub's official Go-based MCP server")
                return candidate
            if _is_file(Path(candidate.target)):
                info(f"Found MCP server at: {candidate.target}")
                return candidate
            debug(f"No MCP server at: {candidate.target}")

        raise ServerNotFoundError(
            "MCP server not found",
            hints=[
                "Install Go to run GitHub's official server (go run "
                f"{MANAGED_RUNTIME_MODULE} stdio)",
                f"Or install {LEGACY_SERVER_NAME} (npm install -g @modelcontextprotocol/server-github)",
                "Or set MCP_SERVER_PATH / pass --server with the server's location",
            ],
        )

    def _check_explicit(self, explicit_path: str) -> ExecutableCandidate:
        if is_managed_runtime_marker(explicit_path):
            return ExecutableCandidate(kind=CandidateKind.MANAGED_RUNTIME, target=explicit_path)
        path = Path(explicit_path).expanduser()
        if not _is_file(path):
            raise ServerPathInvalidError(
                f"Specified server path does not exist: {explicit_path}",
                hints=["Check the --server flag or MCP_SERVER_PATH"],
            )
        info(f"Using MCP server at: {path}")
        return ExecutableCandidate(kind=CandidateKind.CONFIGURED_OVERRIDE, target=str(path))

    def _candidates(self) -> Iterator[ExecutableCandidate]:
        """Yield candidates lazily so later probes only run when needed."""
        if self._which(GO_BINARY):
            yield ExecutableCandidate(
                kind=CandidateKind.MANAGED_RUNTIME, target=MANAGED_RUNTIME_MODULE
            )

        legacy = self._which(LEGACY_SERVER_NAME)
        if legacy:
            yield _path_candidate(legacy)

        root = self._npm_root()
        if root:
            for segments in NPM_PACKAGE_ENTRYPOINTS:
                yield _path_candidate(Path(root).joinpath(*segments))

        home = Path.home() if self._home is None else self._home
        cwd = Path.cwd() if self._cwd is None else self._cwd
        for path in conventional_paths(home, cwd):
            yield _path_candidate(path)


def _path_candidate(path: object) -> ExecutableCandidate:
    return ExecutableCandidate(kind=CandidateKind.RESOLVED_PATH, target=str(path))


def _is_file(path: Path) -> bool:
    """Return True if *path* is a file; unreachable paths count as absent."""
    try:
        return path.is_file()
    except OSError as exc:
        debug(f"Cannot check {path}: {exc}")
        return False
