# src/resolve/exclusion.py - v1
"""Exclusion and remote-reference checks."""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable

# Scheme-prefixed (http:, https:, data:, ...) or protocol-relative.
_REMOTE_URL_RE = re.compile(r"^(?:[a-z][a-z0-9+.\-]*:|//)", re.IGNORECASE)


def is_remote_url(value: str) -> bool:
    """Whether ``value`` is an absolute/remote reference."""
    return bool(_REMOTE_URL_RE.match(value.strip()))


def matches_exclusion(path: str, patterns: Iterable[str | re.Pattern[str]]) -> bool:
    """Whether ``path`` matches any exclusion pattern.

    Compiled patterns are searched; strings are glob patterns, tried against the
    path as written and without its leading slash.
    """
    candidates = {path, path.lstrip("/")}
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            if any(pattern.search(c) for c in candidates):
                return True
            continue
        if any(c == pattern or fnmatch.fnmatchcase(c, pattern) for c in candidates):
            return True
    return False
