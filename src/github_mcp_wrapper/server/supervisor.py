"""Process supervisor for the MCP server child.

:class:`ProcessSupervisor` turns an
:class:`~github_mcp_wrapper.models.ExecutableCandidate` into a command line,
starts it with the token injected into its environment, and blocks until
it exits.  While waiting, SIGINT and SIGTERM delivered to the wrapper are
forwarded to the child; the wrapper keeps waiting and only returns once the
child is gone, so the child always gets to shut down on its own terms.

The child inherits the wrapper's stdin/stdout/stderr, which is how the MCP
stdio transport reaches the editor.

Exit handling:

* normal exit -- :meth:`ProcessSupervisor.launch` returns the child's code;
* killed by a signal -- :class:`~github_mcp_wrapper.exceptions.ChildSignalTermination`
  (exit ``128 + signum``);
* could not start -- :class:`~github_mcp_wrapper.exceptions.ChildSpawnError`
  (exit 1).
"""

from __future__ import annotations

import os
import shutil
import signal
import subprocess
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence

from github_mcp_wrapper.exceptions import (
    ChildSignalTermination,
    ChildSpawnError,
    MissingRuntimeError,
    UnsupportedCandidateError,
)
from github_mcp_wrapper.models import Credential, ExecutableCandidate, WrapperSettings
from github_mcp_wrapper.output import debug, info, warning

GO_BINARY = "go"
NODE_BINARY = "node"
NODE_SCRIPT_SUFFIX = ".js"
STDIO_SUBCOMMAND = "stdio"

CHILD_TOKEN_VARS = ("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN")
CHILD_PORT_VAR = "PORT"
CHILD_LOG_LEVEL_VAR = "LOG_LEVEL"

FORWARDED_SIGNALS: tuple[int, ...] = (signal.SIGINT, signal.SIGTERM)

Which = Callable[[str], Optional[str]]


def signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"


class SupervisedProcess:
    """A running child and the signals relayed to it.

    Args:
        handle: The :class:`subprocess.Popen` handle of the child.

    Attributes:
        received_signals: Signal numbers forwarded to the child, in order.
        shutdown_requested: Set by the first forwarded signal; the
            supervisor checks it after the child exits to report that the
            exit followed a shutdown request.
    """

    def __init__(self, handle: subprocess.Popen) -> None:
        self.handle = handle
        self.received_signals: list[int] = []
        self.shutdown_requested = threading.Event()
        self._exit_status: Optional[int] = None

    @property
    def pid(self) -> int:
        return self.handle.pid

    @property
    def exit_status(self) -> Optional[int]:
        """The status reported by the OS, or ``None`` while still running."""
        return self._exit_status

    def forward(self, signum: int) -> None:
        """Relay *signum* to the child, if it is still running."""
        self.received_signals.append(signum)
        self.shutdown_requested.set()
        if self.handle.poll() is not None:
            return
        try:
            self.handle.send_signal(signum)
        except ProcessLookupError:
            pass
        except ValueError:
            # Windows only supports SIGTERM-style termination for children.
            self.handle.terminate()

    def wait(self) -> int:
        """Block until the child exits and record its status once."""
        status = self.handle.wait()
        if self._exit_status is None:
            self._exit_status = status
        return self._exit_status


class ProcessSupervisor:
    """Launch and supervise one MCP server process.

    Args:
        settings: Supplies the port and log level for the child environment.
        which: ``shutil.which``-compatible lookup used to find ``go``/``node``.
        environ: Base environment for the child; defaults to ``os.environ``.
        forwarded_signals: Signals relayed to the child while waiting.
    """

    def __init__(
        self,
        settings: WrapperSettings,
        which: Which = shutil.which,
        environ: Optional[Mapping[str, str]] = None,
        forwarded_signals: Sequence[int] = FORWARDED_SIGNALS,
    ) -> None:
        self._settings = settings
        self._which = which
        self._environ = environ
        self._forwarded_signals = tuple(forwarded_signals)

    # ------------------------------------------------------------------ #
    # Command and environment
    # ------------------------------------------------------------------ #

    def build_command(
        self, candidate: ExecutableCandidate, extra_args: Sequence[str] = ()
    ) -> list[str]:
        """Return the argv used to start *candidate*.

        Raises:
            MissingRuntimeError: If ``go`` or ``node`` is needed but absent.
            UnsupportedCandidateError: If the target is neither a Go module,
                a ``.js`` file, nor an executable file.
        """
        extra = list(extra_args)
        target = candidate.target

        if candidate.is_managed_runtime:
            go = self._require_runtime(GO_BINARY, "Go", "https://go.dev/dl/")
            debug("Starting GitHub's official Go-based MCP server...")
            return [go, "run", target, STDIO_SUBCOMMAND, *extra]

        if target.endswith(NODE_SCRIPT_SUFFIX):
            node = self._require_runtime(NODE_BINARY, "Node.js", "https://nodejs.org/")
            debug("Starting Node.js MCP server...")
            return [node, target, *extra]

        path = Path(target)
        if path.is_file() and os.access(path, os.X_OK):
            debug("Starting executable MCP server...")
            return [str(path), *extra]

        raise UnsupportedCandidateError(
            f"Unknown server type or server not executable: {target}",
            hints=[f"Make the file executable (chmod +x {target}) or point --server elsewhere"],
        )

    def _require_runtime(self, binary: str, display_name: str, url: str) -> str:
        resolved = self._which(binary)
        if resolved is None:
            raise MissingRuntimeError(
                f"{display_name} required for this server but '{binary}' was not found",
                hints=[f"Install {display_name} ({url}) and make sure '{binary}' is on PATH"],
            )
        return resolved

    def build_environment(self, credential: Credential) -> dict[str, str]:
        """Return the wrapper's environment with the child overrides applied."""
        env = dict(os.environ if self._environ is None else self._environ)
        token = credential.secret()
        for name in CHILD_TOKEN_VARS:
            env[name] = token
        env[CHILD_PORT_VAR] = str(self._settings.port)
        env[CHILD_LOG_LEVEL_VAR] = self._settings.log_level
        return env

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def spawn(self, argv: Sequence[str], env: Mapping[str, str]) -> SupervisedProcess:
        """Start the child with inherited stdio.

        Raises:
            ChildSpawnError: If the OS refuses to start the process.
        """
        try:
            handle = subprocess.Popen(list(argv), env=dict(env))
        except OSError as exc:
            raise ChildSpawnError(
                f"Failed to start MCP server: {exc}",
                hints=[f"Check that {argv[0]} exists and is executable"],
            ) from exc
        return SupervisedProcess(handle)

    def launch(
        self,
        credential: Credential,
        candidate: ExecutableCandidate,
        extra_args: Sequence[str] = (),
    ) -> int:
        """Run the server until it exits and return its exit code.

        Raises:
            MissingRuntimeError, UnsupportedCandidateError: From
                :meth:`build_command`.
            ChildSpawnError: If the process cannot be started.
            ChildSignalTermination: If the child was killed by a signal.
        """
        argv = self.build_command(candidate, extra_args)
        env = self.build_environment(credential)

        info("Starting GitHub MCP server...")
        info(f"Server path: {candidate.target}")
        info(f"Port: {self._settings.port}")

        process = self.spawn(argv, env)
        debug(f"MCP server started with pid {process.pid}")
        with self._forwarding(process):
            status = process.wait()

        if process.shutdown_requested.is_set():
            forwarded = ", ".join(signal_name(s) for s in process.received_signals)
            info(f"MCP server stopped after forwarded {forwarded}")

        if status < 0:
            name = signal_name(-status)
            warning(f"MCP server terminated by signal {name}")
            raise ChildSignalTermination(-status, name)

        info(f"MCP server exited with code {status}")
        return status

    @contextmanager
    def _forwarding(self, process: SupervisedProcess) -> Iterator[None]:
        """Relay forwarded signals to *process* for the duration of the block.

        Handlers can only be installed from the main thread; elsewhere the
        block runs without relaying.
        """
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
            info(f"Received {signal_name(signum)}, forwarding to MCP server...")
            process.forward(signum)

        previous = {}
        for signum in self._forwarded_signals:
            previous[signum] = signal.signal(signum, _handler)
        try:
            yield
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, signal.SIG_DFL if handler is None else handler)
