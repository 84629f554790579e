"""Numeric process exit codes.

The wrapper's own failures all collapse onto :data:`EXIT_GENERIC_FAILURE`
so that an editor launching it only has to distinguish "the wrapper gave
up" from "the server exited". When the server runs, its exit code is
passed through unchanged.

Example::

    $ github-mcp-wrapper --validate
    $ echo $?
    1   # no token found, or the token was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""Credential resolution, validation, server location, or launch failed."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SIGNAL_BASE = 128
"""Added to the signal number when the child was killed by a signal."""
