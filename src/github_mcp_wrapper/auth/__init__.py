"""Credential resolution and validation for github_mcp_wrapper.

The main entry points are:

- :class:`CredentialReader` -- abstract base class for one credential source.
- :class:`CredentialResolver` -- tries readers in priority order.
- :func:`create_default_resolver` -- factory for the standard chain
  (``gh`` CLI, environment variables, hosts file, token files).
- :func:`validate_credential` -- checks a token against ``GET /user``.

Typical usage::

    from github_mcp_wrapper.auth import create_default_resolver, validate_credential

    credential = create_default_resolver(settings).resolve(explicit_token)
    login = validate_credential(credential, settings)
"""

from github_mcp_wrapper.auth.base import CredentialReader, is_absent
from github_mcp_wrapper.auth.gh_cli import GhCliReader, check_gh_auth_status
from github_mcp_wrapper.auth.readers import (
    TOKEN_ENV_VARS,
    EnvironmentReader,
    HostsFileReader,
    TokenFileReader,
)
from github_mcp_wrapper.auth.resolver import CredentialResolver, create_default_resolver
from github_mcp_wrapper.auth.validator import MIN_TOKEN_LENGTH, validate_credential

__all__ = [
    "CredentialReader",
    "CredentialResolver",
    "EnvironmentReader",
    "GhCliReader",
    "HostsFileReader",
    "MIN_TOKEN_LENGTH",
    "TOKEN_ENV_VARS",
    "TokenFileReader",
    "check_gh_auth_status",
    "create_default_resolver",
    "is_absent",
    "validate_credential",
]
