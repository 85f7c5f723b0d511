# src/cache/sqlite_store.py - v1
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

All namespaces share one database file under CACHE_ROOT; rows are keyed by
``(namespace, content hash)``. Values are stored as JSON.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from cdnrewrite.cache.base_cache_store import BaseCacheStore
from cdnrewrite.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS resolved_urls (
    namespace   TEXT NOT NULL,
    key         TEXT NOT NULL,
    value       TEXT NOT NULL,
    source_path TEXT,
    created_at  TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
);
"""

_COLUMNS = "key, value, source_path, created_at"


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store, one connection per namespace."""

    def __init__(self, db_path: Path | str, namespace: str) -> None:
        super().__init__(namespace)
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._db_path)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def get(self, key: str) -> CacheEntry | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM resolved_urls WHERE namespace = ? AND key = ?",
            (self._namespace, key),
        ).fetchone()
        return None if row is None else _to_entry(row)

    async def put(self, key: str, entry: CacheEntry) -> None:
        with self._conn:
            self._conn.execute(
                f"INSERT OR REPLACE INTO resolved_urls (namespace, {_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    self._namespace,
                    key,
                    json.dumps(entry.value),
                    entry.source_path,
                    entry.created_at.isoformat(),
                ),
            )

    async def delete(self, key: str) -> None:
        with self._conn:
            self._conn.execute(
                "DELETE FROM resolved_urls WHERE namespace = ? AND key = ?",
                (self._namespace, key),
            )

    async def list_entries(self) -> list[CacheEntry]:
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM resolved_urls WHERE namespace = ? ORDER BY key",
            (self._namespace,),
        ).fetchall()
        return [entry for entry in map(_to_entry, rows) if entry is not None]

    def close(self) -> None:
        self._conn.close()


def _to_entry(row: tuple[str, str, str | None, str]) -> CacheEntry | None:
    key, value, source_path, created_at = row
    try:
        return CacheEntry(
            key=key,
            value=json.loads(value),
            source_path=source_path,
            created_at=datetime.fromisoformat(created_at),
        )
    except ValueError as e:
        logger.warning("Unreadable cache row %s: %s", key, e)
        return None
