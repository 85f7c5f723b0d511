# src/cache/models.py - v1
"""Cache domain models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """Single cache entry: content hash to previously computed result."""

    key: str
    value: Any
    source_path: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
