# src/extraction/css_extractor.py - v2
"""Stylesheet extractor: property-aware rewriting of declaration values."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable

from cdnrewrite.core.models import (
    CSS_PROPERTY,
    CSS_VALUE,
    Document,
    DocumentKind,
    RewriteResult,
    Token,
)
from cdnrewrite.core.render import render_tokens
from cdnrewrite.extraction.base_extractor import BaseExtractor
from cdnrewrite.extraction.patterns import replace_css_resource

logger = logging.getLogger(__name__)


class CssExtractor(BaseExtractor):
    """Extractor for stylesheet documents (.css and inline style blocks).

    A ``css_property`` token arms the rule for the next ``css_value`` token
    only; the pending property is cleared as soon as a value consumes it.
    """

    @property
    def kind(self) -> DocumentKind:
        return "stylesheet"

    async def extract(self, document: Document) -> RewriteResult:
        host = self._context.host
        source_tokens = await host.get_ast(document)
        suppress = (
            self._context.options.not_update_resource
            or document.flags.suppress_rewrite
        )
        tokens = (
            [t.model_copy(deep=True) for t in source_tokens]
            if suppress
            else source_tokens
        )

        pending: list[Awaitable[None]] = []
        prop = ""
        for token in tokens:
            if token.type == CSS_PROPERTY:
                prop = token.value.strip().lower()
                continue
            if token.type != CSS_VALUE or not prop:
                continue
            pending.append(self._rewrite_value(token, prop))
            prop = ""

        logger.debug("%s: %d declaration values to scan", document.path, len(pending))
        await asyncio.gather(*pending)

        if document.flags.is_virtual:
            # No physical output: the URL comes from the in-memory rendering.
            url = await self._context.urls.get_cdn_url(
                render_tokens(tokens), document.path
            )
            return RewriteResult.for_stylesheet(url, tokens)

        if not suppress:
            host.set_ast(document, tokens)
        # Under suppression the host still holds the original tokens.
        content = await host.get_content(document)
        url = await self._context.urls.get_cdn_url(content, document.path)
        return RewriteResult.for_stylesheet(url, tokens)

    async def _rewrite_value(self, token: Token, prop: str) -> None:
        token.value = await self.rewrite_value(token.value, prop)

    async def rewrite_value(self, value: str, prop: str = "") -> str:
        """Rewrite one value; an empty ``prop`` applies the background rule only."""
        return await replace_css_resource(value, prop, self.resolve)
