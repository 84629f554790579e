"""Token validation against the GitHub REST API.

:func:`validate_credential` makes a single ``GET /user`` request.  A token
is accepted only when the request succeeds with a 2xx status *and* the JSON
body carries a ``login`` field.  There is no retry: a timeout or network
failure is reported as-is and the invocation ends.
"""

from __future__ import annotations

from typing import Optional

import httpx

from github_mcp_wrapper.exceptions import (
    CredentialRejectedError,
    CredentialTooShortError,
    ValidationNetworkError,
)
from github_mcp_wrapper.models import Credential, WrapperSettings
from github_mcp_wrapper.output import debug, info

MIN_TOKEN_LENGTH = 20
USER_AGENT = "GitHub-MCP-Wrapper/1.0.0"
ACCEPT = "application/vnd.github.v3+json"

_REJECTED_HINTS = [
    "Check that the token has not expired or been revoked",
    "Refresh the GitHub CLI login with 'gh auth refresh' or create a new token",
]


def validate_credential(
    credential: Credential,
    settings: WrapperSettings,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Check *credential* against the ``/user`` endpoint.

    Args:
        credential: The token to check.
        settings: Supplies ``api_url`` and ``validate_timeout``.
        transport: Optional httpx transport, used by tests to avoid real
            network traffic.

    Returns:
        The ``login`` of the authenticated user.

    Raises:
        CredentialTooShortError: If the token is shorter than
            :data:`MIN_TOKEN_LENGTH`.  No request is made.
        ValidationNetworkError: On timeout or any transport-level failure.
        CredentialRejectedError: On a non-2xx response, or a 2xx response
            without a ``login`` field.
    """
    info("Validating GitHub token...")
    if len(credential) < MIN_TOKEN_LENGTH:
        raise CredentialTooShortError(
            f"Token appears to be too short (less than {MIN_TOKEN_LENGTH} characters)",
            hints=[f"Token from {credential.source.describe()} looks truncated"],
        )

    headers = {
        "Authorization": f"token {credential.secret()}",
        "Accept": ACCEPT,
        "User-Agent": USER_AGENT,
    }
    url = settings.api_url.rstrip("/") + "/user"
    debug(f"GET {url} with token {credential.masked()}")

    try:
        with httpx.Client(timeout=settings.validate_timeout, transport=transport) as client:
            response = client.get(url, headers=headers)
    except httpx.TimeoutException as exc:
        raise ValidationNetworkError(
            "Token validation failed - request timeout",
            hints=["Check your network connection and try again"],
        ) from exc
    except httpx.HTTPError as exc:
        raise ValidationNetworkError(
            f"Token validation failed - network error: {exc}",
            hints=["Check your network connection and try again"],
        ) from exc

    if not response.is_success:
        raise CredentialRejectedError(
            f"Token validation failed (HTTP status: {response.status_code})",
            hints=_REJECTED_HINTS,
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise CredentialRejectedError(
            f"Token validation failed - invalid JSON response: {exc}",
            hints=_REJECTED_HINTS,
        ) from exc

    login = body.get("login") if isinstance(body, dict) else None
    if not login:
        raise CredentialRejectedError(
            "Token validation failed - no login field in response",
            hints=_REJECTED_HINTS,
        )
    return str(login)
