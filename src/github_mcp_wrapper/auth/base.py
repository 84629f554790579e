"""Abstract base class for credential readers.

A reader knows how to look in exactly one place -- the GitHub CLI, a set of
environment variables, a file -- and either returns a
:class:`~github_mcp_wrapper.models.Credential` or ``None``.  Readers never
raise for "nothing here"; absence is the normal outcome and the
:class:`~github_mcp_wrapper.auth.resolver.CredentialResolver` simply moves on
to the next reader.

To add a new source, subclass :class:`CredentialReader`, implement
:attr:`~CredentialReader.label` and :meth:`~CredentialReader.read`, and add
an instance to the resolver's reader list.

See Also:
    :mod:`github_mcp_wrapper.auth.resolver` for ordering and dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from github_mcp_wrapper.models import Credential

NULL_LITERAL = "null"


def is_absent(value: Optional[str]) -> bool:
    """Return ``True`` for ``None``, blank strings, and the literal ``"null"``.

    ``gh auth token`` prints ``null`` in some failure modes instead of
    exiting non-zero, so that value counts as "no token".
    """
    if value is None:
        return True
    stripped = value.strip()
    return not stripped or stripped == NULL_LITERAL


class CredentialReader(ABC):
    """Abstract base class for one credential source."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Return a short description of where this reader looks."""
        ...

    @abstractmethod
    def read(self) -> Optional[Credential]:
        """Look for a credential.

        Returns:
            A :class:`~github_mcp_wrapper.models.Credential`, or ``None``
            when this source has nothing usable.  Implementations should
            swallow only the errors that mean "not available here"
            (missing file, missing binary) and log them at warning level.
        """
        ...
