# src/cache/fingerprint.py - v2
"""Content fingerprinting.

Cache entries and synthetic document names are addressed by the hash of the
exact bytes, never by path.
"""

from __future__ import annotations

import hashlib


def content_hash(data: bytes | str) -> str:
    """MD5 hex digest of the exact bytes (str is encoded as UTF-8)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.md5(data).hexdigest()  # noqa: S324


def synthetic_path(data: bytes | str, extension: str) -> str:
    """Synthetic filename for inline content, e.g. ``<hash>.css``."""
    return f"{content_hash(data)}.{extension.lstrip('.')}"
