"""Line-oriented token lookup in the GitHub CLI ``hosts.yml`` file.

``gh`` keeps its per-host login state in ``~/.config/gh/hosts.yml``::

    github.example.com:
        oauth_token: gho_enterprise
    github.com:
        user: octocat
        oauth_token: "gho_xxxxxxxxxxxxxxxxxxxx"
        git_protocol: https

Only the ``oauth_token`` of one host block is needed, so the file is
scanned line by line instead of being loaded as YAML.  A syntax error
elsewhere in the file (a half-written block for another host, an unknown
key) therefore never prevents the token from being found.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

_TOKEN_LINE = re.compile(r"^\s*oauth_token\s*:\s*(?P<value>.*?)\s*$")
_QUOTES = "\"'"


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _is_host_header(stripped: str, host: str) -> bool:
    if not stripped.endswith(":"):
        return False
    return stripped[:-1].strip().strip(_QUOTES) == host


def _clean_value(raw: str) -> str:
    value = raw.strip()
    if value[:1] and value[0] in _QUOTES:
        closing = value.find(value[0], 1)
        if closing != -1:
            return value[1:closing].strip()
    # Unquoted: a trailing comment needs whitespace before the '#'.
    value = value.split(" #", 1)[0]
    return value.strip().strip(_QUOTES).strip()


def find_oauth_token(lines: Iterable[str], host: str) -> Optional[str]:
    """Return the ``oauth_token`` inside *host*'s block, or ``None``.

    The block starts at a line reading ``<host>:`` and ends at the next
    non-blank, non-comment line that is indented no deeper than that header.
    The first ``oauth_token:`` line inside the block wins; its value is
    returned with surrounding whitespace and quotes removed.

    Args:
        lines: The file content, one element per line.
        host: Host name to look for, e.g. ``"github.com"``.
    """
    header_indent: Optional[int] = None
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if header_indent is None:
            if _is_host_header(stripped, host):
                header_indent = _indent(line)
            continue

        if _indent(line) <= header_indent:
            # Left the target block; another block for the host may follow.
            header_indent = _indent(line) if _is_host_header(stripped, host) else None
            continue

        match = _TOKEN_LINE.match(line)
        if match:
            value = _clean_value(match.group("value"))
            if value:
                return value
    return None
