# src/extraction/binary_extractor.py - v1
"""Binary/other assets: no inner references, only the asset's own URL."""

from __future__ import annotations

from cdnrewrite.core.models import Document, DocumentKind, RewriteResult
from cdnrewrite.extraction.base_extractor import BaseExtractor


class BinaryExtractor(BaseExtractor):
    """Extractor for images, fonts and any other opaque asset."""

    @property
    def kind(self) -> DocumentKind:
        return "other"

    async def extract(self, document: Document) -> RewriteResult:
        content = await self._context.host.get_content(document, binary=True)
        url = await self._context.urls.get_cdn_url(content, document.path)
        return RewriteResult.for_other(url)
