# src/cache/memory_store.py - v1
"""In-process cache store (CACHE_BACKEND=memory).

Entries live for the lifetime of the process. Used by tests and by builds
that do not need a persistent cache.
"""

from __future__ import annotations

from cdnrewrite.cache.base_cache_store import BaseCacheStore
from cdnrewrite.cache.models import CacheEntry


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache store."""

    def __init__(self, namespace: str) -> None:
        super().__init__(namespace)
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    async def put(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def list_entries(self) -> list[CacheEntry]:
        return list(self._entries.values())
