# tests/unit/extraction/conftest.py - v2
"""Extractor fixtures: a RewriteContext with mocked resolution collaborators."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from cdnrewrite.config.options import RunOptions
from cdnrewrite.extraction.base_extractor import RewriteContext
from cdnrewrite.host.memory_host import MemoryHost


@pytest.fixture
def make_context():
    """Factory: (mapping=None, **options) -> RewriteContext.

    References resolve through ``mapping``, defaulting to ``/cdn<path>``.
    Own URLs are always ``https://cdn.example/self``.
    """

    def _make(mapping: dict[str, str] | None = None, **options) -> RewriteContext:
        mapping = mapping or {}

        async def _resolve(path: str, referrer: str | None = None) -> str:
            return mapping.get(path, f"/cdn{path}")

        references = MagicMock()
        references.resolve = AsyncMock(side_effect=_resolve)
        urls = MagicMock()
        urls.get_cdn_url = AsyncMock(return_value="https://cdn.example/self")
        sub_documents = MagicMock()
        sub_documents.rewrite_template = AsyncMock()
        sub_documents.rewrite_style = AsyncMock()
        return RewriteContext(
            host=MemoryHost(),
            options=RunOptions(**options),
            references=references,
            urls=urls,
            sub_documents=sub_documents,
        )

    return _make
