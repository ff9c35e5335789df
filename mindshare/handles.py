"""Canonical form of social-media handles.

Handles arrive as bare names, ``@name`` or full profile URLs depending on
where a row was ingested.  Every comparison in the system goes through
:func:`normalize_handle` on both sides so that search results do not depend
on the ingestion path.
"""

from __future__ import annotations

import re

AVATAR_BASE_URL = "https://unavatar.io/twitter"

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_HOST_RE = re.compile(r"^(www\.)?(x\.com|twitter\.com)/", re.IGNORECASE)
_QUERY_RE = re.compile(r"\?.*$")


def normalize_handle(value: str | None) -> str:
    """Return the lowercase bare handle for *value*.

    Strips scheme, ``x.com``/``twitter.com`` host, query string, trailing
    slashes and leading ``@``.  Unrecognised input passes through lowercased.

    >>> normalize_handle("https://x.com/Foo?x=1")
    'foo'
    >>> normalize_handle("@foo")
    'foo'
    """
    if not value:
        return ""
    handle = value.strip().lower()
    # Repeat until stable so inputs like "@https://x.com/foo" collapse fully.
    while True:
        stripped = _strip_once(handle)
        if stripped == handle:
            return handle
        handle = stripped


def _strip_once(handle: str) -> str:
    handle = _SCHEME_RE.sub("", handle)
    handle = _HOST_RE.sub("", handle)
    handle = _QUERY_RE.sub("", handle)
    return handle.rstrip("/").lstrip("@").strip()


def normalize_search_term(value: str | None) -> str:
    """Normalize user input the same way stored handles are normalized."""
    return normalize_handle(value)


def display_handle(value: str | None) -> str:
    """Return the ``@``-prefixed form used in API responses."""
    return f"@{normalize_handle(value)}"


def avatar_url(value: str | None) -> str:
    """Derive the public avatar URL for a handle."""
    return f"{AVATAR_BASE_URL}/{normalize_handle(value)}"


def matches_term(
    handle: str | None,
    display_name: str | None,
    term: str,
    *,
    bidirectional: bool = False,
) -> bool:
    """Check whether *term* identifies the user with *handle*/*display_name*.

    *term* must already be normalized.  Matches when the term is a substring
    of the normalized handle or of the lowercased display name.  With
    ``bidirectional=True`` a handle contained in the term also matches, so a
    full-name search still finds a shorter stored handle.
    """
    if not term:
        return False
    normalized = normalize_handle(handle)
    name = (display_name or "").lower()
    if normalized and term in normalized:
        return True
    if bidirectional and normalized and normalized in term:
        return True
    return term in name
