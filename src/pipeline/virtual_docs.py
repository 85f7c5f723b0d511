# src/pipeline/virtual_docs.py - v1
"""Virtual sub-documents for inline script/style content.

Inline bodies are promoted to synthetic documents named after the hash of
their content (``<hash>.html`` for template fragments, ``<hash>.css`` for
style bodies), run through the whole pipeline, and spliced back into the
content slot of the parent token. Identical blocks anywhere in the build map
to the same synthetic document.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from cdnrewrite.cache.fingerprint import synthetic_path
from cdnrewrite.core.models import ContentExt, Document, Token
from cdnrewrite.core.render import render_tokens

if TYPE_CHECKING:
    from cdnrewrite.host.base_host import BaseHost

logger = logging.getLogger(__name__)


class SyntheticDocumentRegistry:
    """Synthetic path (content hash + extension) -> Document.

    The entry is reserved before the host is asked to create the document,
    so concurrent requests for the same hash share a single creation.
    """

    def __init__(self) -> None:
        self._documents: dict[str, asyncio.Task[Document]] = {}

    def __contains__(self, path: str) -> bool:
        return path in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def paths(self) -> list[str]:
        return sorted(self._documents)

    async def get_or_create(
        self, path: str, payload: list[Token] | str, host: BaseHost
    ) -> Document:
        task = self._documents.get(path)
        if task is None:
            task = asyncio.ensure_future(host.add_file(path, payload, virtual=True))
            self._documents[path] = task
            logger.debug("New synthetic document %s", path)
        return await asyncio.shield(task)


class SubDocumentManager:
    """Recurse the pipeline over inline embedded content."""

    def __init__(self, host: BaseHost, registry: SyntheticDocumentRegistry) -> None:
        self._host = host
        self._registry = registry

    @property
    def registry(self) -> SyntheticDocumentRegistry:
        return self._registry

    async def rewrite_template(self, content: Token) -> None:
        """Inline ``<script type="text/html">`` body holding markup."""
        document = await self._promote(content, "html")
        result = await self._host.invoke_self(document, is_tpl=True)
        _content_ext(content).tokens = result.ast

    async def rewrite_style(self, content: Token) -> None:
        """Inline ``<style>`` body."""
        document = await self._promote(content, "css")
        result = await self._host.invoke_self(document)
        _content_ext(content).tokens = result.ast

    async def _promote(self, content: Token, extension: str) -> Document:
        tokens = content.ext.tokens if isinstance(content.ext, ContentExt) else None
        raw = content.value or (render_tokens(tokens) if tokens else "")
        path = synthetic_path(raw, extension)
        payload: list[Token] | str = tokens if tokens is not None else raw
        return await self._registry.get_or_create(path, payload, self._host)


def _content_ext(content: Token) -> ContentExt:
    if not isinstance(content.ext, ContentExt):
        content.ext = ContentExt()
    return content.ext
