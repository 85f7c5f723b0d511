# src/cache/redis_store.py - v1
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install cdnrewrite[redis].
Lets several build machines share one resolved-URL cache.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from cdnrewrite.cache.base_cache_store import BaseCacheStore
from cdnrewrite.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_KEY_PREFIX = "cdnrewrite:cache:"


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store for distributed builds."""

    def __init__(self, redis_url: str, namespace: str) -> None:
        super().__init__(namespace)
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._prefix = f"{_KEY_PREFIX}{namespace}:"
        self._index_key = f"{self._prefix}__index__"

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve cache entry by key."""
        data = self._client.get(f"{self._prefix}{key}")
        if data is None:
            return None
        try:
            return CacheEntry.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    async def put(self, key: str, entry: CacheEntry) -> None:
        """Store a cache entry."""
        self._client.set(f"{self._prefix}{key}", entry.model_dump_json())
        # Index of keys for list_entries
        self._client.sadd(self._index_key, key)

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        self._client.delete(f"{self._prefix}{key}")
        self._client.srem(self._index_key, key)

    async def list_entries(self) -> list[CacheEntry]:
        """List all cached entries of this namespace."""
        entries: list[CacheEntry] = []
        for key in sorted(self._client.smembers(self._index_key)):
            entry = await self.get(key)
            if entry is not None:
                entries.append(entry)
        return entries

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
