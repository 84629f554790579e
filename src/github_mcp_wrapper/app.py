"""Typer application and CLI entry point for github_mcp_wrapper.

This module is the thin adapter between the command line and the library.
The single command parses flags, builds one
:class:`~github_mcp_wrapper.models.WrapperSettings` value, then runs the
pipeline::

    resolve credential -> (validate) -> locate server -> supervise server

Every :class:`~github_mcp_wrapper.exceptions.WrapperError` is reported with
its remediation hints and turned into its exit code.  Everything after a
``--`` separator is handed to the server verbatim.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`github_mcp_wrapper.config`: Settings precedence resolution.
    :mod:`github_mcp_wrapper.output`: stderr diagnostics.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from typer.core import TyperCommand

from github_mcp_wrapper import __version__
from github_mcp_wrapper.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS

_HELP_EPILOG = (
    "Environment: GITHUB_TOKEN, GITHUB_PERSONAL_ACCESS_TOKEN, GH_TOKEN (token); "
    "MCP_SERVER_PATH (server path); GITHUB_MCP_PORT (default port); "
    "LOG_LEVEL (default: info).\n\n"
    "Examples: github-mcp-wrapper --validate | github-mcp-wrapper --port 3001 | "
    "github-mcp-wrapper -- --additional-server-args"
)

app = typer.Typer(
    name="github-mcp-wrapper",
    help="Run the GitHub MCP server with automatic GitHub authentication.",
    add_completion=False,
    rich_markup_mode="rich",
)

_SEPARATOR = "--"
_SERVER_ARGS_KEY = "server_args"


class _RunCommand(TyperCommand):
    """Command that records the arguments given after the ``--`` separator.

    Click merges positionals from both sides of ``--`` into one list, so the
    raw split is kept in ``ctx.meta`` for :func:`run` to check.
    """

    def parse_args(self, ctx: Any, args: list[str]) -> list[str]:
        if _SEPARATOR in args:
            ctx.meta[_SERVER_ARGS_KEY] = list(args[args.index(_SEPARATOR) + 1 :])
        else:
            ctx.meta[_SERVER_ARGS_KEY] = []
        return super().parse_args(ctx, args)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"github-mcp-wrapper {__version__}")
        raise typer.Exit()


def _report(exc: Exception) -> None:
    """Print a wrapper error and its remediation hints to stderr."""
    from github_mcp_wrapper.output import error, suggest

    error(str(exc))
    for hint in getattr(exc, "hints", []):
        suggest(hint)


@app.command(
    cls=_RunCommand,
    epilog=_HELP_EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)
def run(
    ctx: typer.Context,
    server_args: Optional[list[str]] = typer.Argument(
        None,
        metavar="[-- SERVER_ARGS...]",
        help="Arguments passed verbatim to the MCP server.",
        show_default=False,
    ),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", min=0, max=65535,
        help="Port for the MCP server (default: $GITHUB_MCP_PORT or 3000).",
    ),
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Path to the MCP server executable."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="Use this GitHub token instead of auto-detecting one."
    ),
    validate: bool = typer.Option(
        False, "--validate", "-v", help="Validate the token against the GitHub API and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Resolve a GitHub token, locate the MCP server, and run it.

    The token is taken from --token, then ``gh auth token``, then the
    GITHUB_TOKEN / GITHUB_PERSONAL_ACCESS_TOKEN / GH_TOKEN variables, then
    ``~/.config/gh/hosts.yml``, ``~/.github_token`` and
    ``~/.config/github/token``.
    """
    from github_mcp_wrapper.auth import (
        check_gh_auth_status,
        create_default_resolver,
        validate_credential,
    )
    from github_mcp_wrapper.config import resolve_settings
    from github_mcp_wrapper.exceptions import InvalidUsageError, WrapperError
    from github_mcp_wrapper.output import OutputManager, debug, info, set_output, success
    from github_mcp_wrapper.server import ExecutableLocator, ProcessSupervisor

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    try:
        passthrough = list(ctx.meta.get(_SERVER_ARGS_KEY, []))
        extra = list(server_args or [])
        if extra != passthrough:
            raise InvalidUsageError(
                f"Unexpected argument: {extra[0]}",
                hints=[
                    "Pass arguments for the MCP server after --, "
                    "e.g. github-mcp-wrapper -- --read-only"
                ],
            )

        settings = resolve_settings(cli_port=port, cli_server_path=server)
        if settings.is_debug and not verbose:
            set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=True))

        info("GitHub MCP Server Wrapper starting...")
        if not token:
            check_gh_auth_status()

        credential = create_default_resolver(settings).resolve(token)
        debug(f"Using token {credential.masked()} from {credential.source.describe()}")

        if validate:
            login = validate_credential(credential, settings)
            success(f"Token validation successful (authenticated as {login})")
            success("All validation checks passed - wrapper is ready!")
            raise typer.Exit(code=EXIT_SUCCESS)

        candidate = ExecutableLocator().locate(settings.server_path)
        exit_code = ProcessSupervisor(settings).launch(
            credential, candidate, passthrough
        )
    except WrapperError as exc:
        _report(exc)
        raise typer.Exit(code=exc.exit_code) from None

    raise typer.Exit(code=exit_code)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C before launch exits cleanly.

    The supervisor replaces it with a forwarding handler while the server
    runs and restores it afterwards.
    """

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from github_mcp_wrapper.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``github-mcp-wrapper`` console script.

    Unhandled :class:`~github_mcp_wrapper.exceptions.WrapperError` instances
    cause a clean exit with the error's ``exit_code``.  All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from github_mcp_wrapper.exceptions import WrapperError
        from github_mcp_wrapper.output import error

        if isinstance(exc, WrapperError):
            _report(exc)
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
