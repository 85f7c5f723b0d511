# src/extraction/js_extractor.py - v1
"""Script extractor: rewrite ``{cdn: "path"}.cdn`` pseudo-literals."""

from __future__ import annotations

import logging

from cdnrewrite.core.models import Document, DocumentKind, RewriteResult
from cdnrewrite.extraction.base_extractor import BaseExtractor
from cdnrewrite.extraction.patterns import replace_js_resource

logger = logging.getLogger(__name__)


class JsExtractor(BaseExtractor):
    """Extractor for script documents (.js)."""

    @property
    def kind(self) -> DocumentKind:
        return "script"

    async def extract(self, document: Document) -> RewriteResult:
        """Rewrite the script text, then resolve the script's own URL from it."""
        content = await self._context.host.get_content(document)
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        content = await self.rewrite_text(content)
        url = await self._context.urls.get_cdn_url(content, document.path)
        return RewriteResult.for_script(url, content)

    async def rewrite_text(self, content: str) -> str:
        return await replace_js_resource(content, self.resolve)
