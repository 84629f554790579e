"""Shared test fixtures for github_mcp_wrapper.

Provides an isolated environment (fake home directory, no token variables,
no colour), output state management, helpers for writing fake server
scripts, and the Typer CLI runner.  These fixtures are automatically
discovered by pytest.
"""

from __future__ import annotations

import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

from github_mcp_wrapper.output import OutputManager, reset_output, set_output


TOKEN = "ghp_" + "a" * 36
"""A plausible 40-character token for tests."""

_WRAPPER_ENV_VARS = [
    "GITHUB_TOKEN",
    "GITHUB_PERSONAL_ACCESS_TOKEN",
    "GH_TOKEN",
    "MCP_SERVER_PATH",
    "GITHUB_MCP_PORT",
    "LOG_LEVEL",
]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a reference to sys.stderr at creation time.
    When pytest or Typer's CliRunner swaps that stream and the test
    finishes, the cached reference becomes stale.  Resetting forces a fresh
    manager to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless OutputManager for tests that ignore output."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless, verbose OutputManager without timestamps."""
    output = OutputManager(no_color=True, verbose=True, timestamps=False)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate the wrapper from the real user environment.

    Points HOME and the XDG directories at subdirectories of tmp_path,
    clears every variable the wrapper reads, disables colour, and changes
    the working directory to a fresh project directory.

    Returns:
        The fake home directory.
    """
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("NO_COLOR", "1")
    for var in _WRAPPER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(project)
    return home


# ---------------------------------------------------------------------------
# Fake server scripts
# ---------------------------------------------------------------------------


@pytest.fixture
def make_server_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a factory that writes an executable Python script.

    The script runs under the current interpreter via a shebang line, so it
    can stand in for an MCP server binary.
    """

    def _make(body: str, name: str = "fake-server") -> Path:
        path = tmp_path / "bin" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"#!{sys.executable}\n{body}\n", encoding="utf-8")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
