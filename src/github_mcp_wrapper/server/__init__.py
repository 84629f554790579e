"""Locating and supervising the GitHub MCP server.

- :class:`ExecutableLocator` -- finds the server to run.
- :class:`ProcessSupervisor` -- runs it with the token injected and relays
  termination signals until it exits.
"""

from github_mcp_wrapper.server.locator import ExecutableLocator, npm_global_root
from github_mcp_wrapper.server.supervisor import (
    FORWARDED_SIGNALS,
    ProcessSupervisor,
    SupervisedProcess,
)

__all__ = [
    "ExecutableLocator",
    "FORWARDED_SIGNALS",
    "ProcessSupervisor",
    "SupervisedProcess",
    "npm_global_root",
]
