# src/extraction/html_extractor.py - v2
"""Markup extractor: tag attributes, srcset, inline styles and embedded blocks."""

from __future__ import annotations

import asyncio
import logging
import posixpath
import re
from collections.abc import Awaitable

from cdnrewrite.config.tag_attrs import DEFAULT_LINK_RELS
from cdnrewrite.core.errors import MalformedTokenError
from cdnrewrite.core.models import (
    HTML_TAG_SCRIPT,
    HTML_TAG_START,
    HTML_TAG_STYLE,
    Attribute,
    Document,
    DocumentKind,
    EmbeddedExt,
    RewriteResult,
    TagStartExt,
    Token,
)
from cdnrewrite.extraction.base_extractor import BaseExtractor, RewriteContext
from cdnrewrite.extraction.patterns import (
    PLAIN_EXTNAME_RE,
    replace_css_resource,
    replace_js_resource,
)
from cdnrewrite.resolve.exclusion import is_remote_url

logger = logging.getLogger(__name__)

_SRCSET_ITEM_RE = re.compile(r"^(\S+)(\s.*)?$", re.DOTALL)


class HtmlExtractor(BaseExtractor):
    """Extractor for markup documents and template fragments."""

    def __init__(self, context: RewriteContext, referrer: str | None = None) -> None:
        super().__init__(context, referrer)
        self._tag_attrs = context.options.resource_attrs()
        self._rels = set(DEFAULT_LINK_RELS) | set(context.options.rels)

    @property
    def kind(self) -> DocumentKind:
        return "markup"

    async def extract(self, document: Document) -> RewriteResult:
        tokens = await self._context.host.get_ast(document)

        pending: list[Awaitable[object]] = []
        for token in tokens:
            if token.type == HTML_TAG_START:
                pending.append(self.parse_tag_start(token, document.path))
            elif token.type == HTML_TAG_SCRIPT:
                pending.append(self.parse_script_block(token, document.path))
            elif token.type == HTML_TAG_STYLE:
                pending.append(self.parse_style_block(token, document.path))

        logger.debug("%s: %d tokens to inspect", document.path, len(pending))
        await asyncio.gather(*pending)
        return RewriteResult.for_markup(tokens)

    # --- Tag attributes ---

    async def parse_tag_start(self, token: Token, path: str) -> Token:
        """Rewrite the resource attributes of one tag-start token in place."""
        ext = token.ext
        if not isinstance(ext, TagStartExt) or ext.attrs is None:
            raise MalformedTokenError(f"{token.value} is not valid token, file: {path}")

        host = self._context.host
        attrs = ext.attrs
        pending: list[Awaitable[None]] = []

        for attr in self._tag_attrs.get(ext.tag_lower, []):
            value = host.get_attr_value(attrs, attr)
            if not value or is_remote_url(value):
                continue

            # <link rel="alternate" href="/rss.html"> is not a resource
            if ext.tag_lower == "link" and not self._rel_allowed(attrs):
                continue

            if attr == "srcset":
                pending.append(self._rewrite_srcset(attrs, value))
                continue

            # Template syntax or query strings: not meant for this transform
            if not PLAIN_EXTNAME_RE.match(posixpath.splitext(value)[1]):
                logger.debug("Skipping %s=%r on <%s>", attr, value, ext.tag_lower)
                continue

            pending.append(self._rewrite_attr(attrs, attr, value))

        style = host.get_attr_value(attrs, "style")
        if style:
            pending.append(self._rewrite_style_attr(attrs, style))

        if not pending:
            return token

        before = [(a.name, a.value) for a in attrs]
        await asyncio.gather(*pending)
        if [(a.name, a.value) for a in attrs] != before:
            ext.modified = True
        return token

    def _rel_allowed(self, attrs: list[Attribute]) -> bool:
        rel = (self._context.host.get_attr_value(attrs, "rel") or "").strip().lower()
        return rel in self._rels

    async def _rewrite_attr(self, attrs: list[Attribute], attr: str, value: str) -> None:
        url = await self.resolve(value)
        self._context.host.set_attr_value(attrs, attr, url)

    async def _rewrite_srcset(self, attrs: list[Attribute], value: str) -> None:
        """``url desc, url desc`` -> ``url' desc,url' desc`` with descriptors kept."""
        items = [item.strip() for item in value.split(",")]
        candidates = [item for item in items if item]

        async def _one(item: str) -> str:
            match = _SRCSET_ITEM_RE.match(item)
            path, descriptor = match.group(1), match.group(2) or ""
            return f"{await self.resolve(path)}{descriptor}"

        rewritten = await asyncio.gather(*(_one(item) for item in candidates))
        self._context.host.set_attr_value(attrs, "srcset", ",".join(rewritten))

    async def _rewrite_style_attr(self, attrs: list[Attribute], value: str) -> None:
        rewritten = await replace_css_resource(value, "", self.resolve)
        self._context.host.set_attr_value(attrs, "style", rewritten)

    # --- Embedded blocks ---

    async def parse_script_block(self, token: Token, path: str) -> Token:
        ext = self._embedded(token, path)
        start = ext.start
        start_ext = start.ext
        if not isinstance(start_ext, TagStartExt):
            raise MalformedTokenError(f"{start.value} is not valid token, file: {path}")

        if start_ext.is_external:
            await self.parse_tag_start(start, path)
            return token
        if start_ext.is_tpl:
            await self._context.sub_documents.rewrite_template(ext.content)
            return token

        ext.content.value = await replace_js_resource(ext.content.value, self.resolve)
        return token

    async def parse_style_block(self, token: Token, path: str) -> Token:
        ext = self._embedded(token, path)
        await self._context.sub_documents.rewrite_style(ext.content)
        return token

    @staticmethod
    def _embedded(token: Token, path: str) -> EmbeddedExt:
        if not isinstance(token.ext, EmbeddedExt):
            raise MalformedTokenError(f"{token.value} is not valid token, file: {path}")
        return token.ext
