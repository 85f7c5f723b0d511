# src/cache/base_cache_store.py - v1
"""Abstract cache store interface.

One store instance backs one cache namespace.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cdnrewrite.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    def __init__(self, namespace: str) -> None:
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        """Logical cache group served by this store."""
        return self._namespace

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by content hash."""

    @abstractmethod
    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store cache entry."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove cache entry."""

    @abstractmethod
    async def list_entries(self) -> list[CacheEntry]:
        """List all entries of this namespace."""
