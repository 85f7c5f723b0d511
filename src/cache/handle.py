# src/cache/handle.py - v1
"""Cache namespaces and per-content cache handles.

A CacheRegistry is created once per build process and shared by every
document it processes. Namespaces are looked up by logical group, so several
products using one process never see each other's entries.
"""

from __future__ import annotations

import logging
from typing import Any

from cdnrewrite.cache.base_cache_store import BaseCacheStore
from cdnrewrite.cache.cache_factory import create_cache_store
from cdnrewrite.cache.fingerprint import content_hash
from cdnrewrite.cache.models import CacheEntry
from cdnrewrite.config.settings import Settings

logger = logging.getLogger(__name__)


class CacheHandle:
    """get()/set() access to one namespace, scoped to one content hash."""

    def __init__(
        self, store: BaseCacheStore, key: str, source_path: str | None = None
    ) -> None:
        self._store = store
        self._key = key
        self._source_path = source_path

    @property
    def key(self) -> str:
        return self._key

    async def get(self) -> Any:
        """Return the cached value, or None."""
        entry = await self._store.get(self._key)
        return None if entry is None else entry.value

    async def set(self, value: Any) -> None:
        await self._store.put(
            self._key,
            CacheEntry(key=self._key, value=value, source_path=self._source_path),
        )


class NullCacheHandle:
    """No-op handle used when caching is disabled for the run."""

    key = ""

    async def get(self) -> Any:
        return None

    async def set(self, value: Any) -> None:
        return None


class CacheRegistry:
    """Lazily created cache stores, one per logical group."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._stores: dict[str, BaseCacheStore] = {}

    @property
    def settings(self) -> Settings | None:
        return self._settings

    @property
    def default_namespace(self) -> str:
        if self._settings is None:
            return "default/cdn"
        return self._settings.cache_namespace

    @property
    def enabled(self) -> bool:
        return self._settings is None or self._settings.cache_enabled

    def namespace(self, key: str | None = None) -> BaseCacheStore:
        """Return the store for ``key``, creating it on first use."""
        key = key or self.default_namespace
        store = self._stores.get(key)
        if store is None:
            store = create_cache_store(key, self._settings)
            self._stores[key] = store
            logger.debug("Created cache namespace %s (%s)", key, type(store).__name__)
        return store

    def handle_for(
        self,
        content: bytes | str,
        enabled: bool = True,
        source_path: str | None = None,
    ) -> CacheHandle | NullCacheHandle:
        """Build a handle scoped to the hash of ``content``."""
        if not (enabled and self.enabled):
            return NullCacheHandle()
        return CacheHandle(self.namespace(), content_hash(content), source_path)
