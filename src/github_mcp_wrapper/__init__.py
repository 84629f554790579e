"""github_mcp_wrapper -- Authenticate and supervise a GitHub MCP server.

This package finds a usable GitHub token, optionally checks it against the
GitHub REST API, locates an MCP server executable on the current machine,
and runs that server as a supervised child process with the token injected
into its environment.

Typical workflow::

    github-mcp-wrapper --validate          # check the token and exit
    github-mcp-wrapper -- --toolsets repos # run the server with extra args

Modules:
    app: Typer command and console-script entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware paths and settings precedence resolution.
    exceptions: Exception hierarchy with exit codes and remediation hints.
    exit_codes: Numeric process exit codes.
    output: stderr-only diagnostics with Rich support.
    auth: Credential readers, resolver, and validator.
    server: Executable locator and process supervisor.
"""

__version__ = "0.1.0"
