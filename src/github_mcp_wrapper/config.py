"""Configuration management with XDG paths and precedence resolution.

This module builds the single :class:`~github_mcp_wrapper.models.WrapperSettings`
value used by an invocation:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.github-mcp-wrapper/`` on macOS and Windows. See
  :func:`get_config_dir` and :func:`get_data_dir`.
* **User config** -- an optional ``config.json`` in the config directory
  holding defaults for any :class:`WrapperSettings` field.
* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables, the user config, and built-in defaults.

Nothing is written back; the wrapper keeps no state between invocations
apart from crash logs.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from github_mcp_wrapper.exceptions import ConfigError
from github_mcp_wrapper.models import WrapperSettings

_APP_NAME = "github-mcp-wrapper"
_CONFIG_FILENAME = "config.json"

ENV_SERVER_PATH = "MCP_SERVER_PATH"
ENV_PORT = "GITHUB_MCP_PORT"
ENV_LOG_LEVEL = "LOG_LEVEL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory without creating it.

    On Linux/BSD: ``$XDG_CONFIG_HOME/github-mcp-wrapper/`` (default
    ``~/.config/github-mcp-wrapper/``).  On macOS/Windows:
    ``~/.github-mcp-wrapper/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/github-mcp-wrapper/`` (default
    ``~/.local/share/github-mcp-wrapper/``).  On macOS/Windows:
    ``~/.github-mcp-wrapper/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- User config ---


def user_config_path() -> Path:
    """Path to the optional user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_user_config() -> dict[str, Any]:
    """Load the user config file.

    Returns:
        The parsed JSON object, or an empty dict when the file does not exist.

    Raises:
        ConfigError: If the file exists but is unreadable, is not valid JSON,
            or does not contain a JSON object.
    """
    path = user_config_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    server_path = os.environ.get(ENV_SERVER_PATH)
    if server_path:
        overrides["server_path"] = server_path
    port = os.environ.get(ENV_PORT)
    if port:
        overrides["port"] = port
    log_level = os.environ.get(ENV_LOG_LEVEL)
    if log_level:
        overrides["log_level"] = log_level
    return overrides


def resolve_settings(
    cli_port: Optional[int] = None,
    cli_server_path: Optional[str] = None,
) -> WrapperSettings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_port``, ``cli_server_path``)
        2. Environment variables (``MCP_SERVER_PATH``, ``GITHUB_MCP_PORT``,
           ``LOG_LEVEL``)
        3. User config (``~/.config/github-mcp-wrapper/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid or a value fails validation
            (for example a non-numeric ``GITHUB_MCP_PORT``).
    """
    merged: dict[str, Any] = {}
    merged.update(load_user_config())
    merged.update(_env_overrides())
    if cli_server_path is not None:
        merged["server_path"] = cli_server_path
    if cli_port is not None:
        merged["port"] = cli_port

    try:
        return WrapperSettings.model_validate(merged)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(
            f"Invalid configuration: {problems}",
            hints=[
                f"Check {ENV_PORT}, {ENV_SERVER_PATH} and {ENV_LOG_LEVEL}",
                f"Check {user_config_path()}",
            ],
        ) from exc
