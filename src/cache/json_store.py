# src/cache/json_store.py - v1
"""JSON file-based cache store (default CACHE_BACKEND=json).

Stores one JSON file per content hash under ``CACHE_ROOT/<namespace>/``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from cdnrewrite.cache.base_cache_store import BaseCacheStore
from cdnrewrite.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str, namespace: str) -> None:
        super().__init__(namespace)
        self._root = Path(cache_root).expanduser() / _safe_name(namespace)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            return CacheEntry.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, ValueError) as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry."""
        path = self._entry_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(entry.model_dump_json(indent=2), encoding="utf-8")

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        path = self._entry_path(key)
        if path.exists():
            path.unlink()

    async def list_entries(self) -> list[CacheEntry]:
        """List all cached entries of this namespace."""
        entries: list[CacheEntry] = []
        if not self._root.is_dir():
            return entries

        for path in sorted(self._root.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                entries.append(CacheEntry(**data))
            except (ValidationError, ValueError):
                logger.warning("Skipping unreadable cache file %s", path.name)
                continue

        return entries

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        return self._root / f"{_safe_name(key)}.json"


def _safe_name(name: str) -> str:
    return name.replace("/", "_").replace("\\", "_")
