# src/pipeline/rewriter.py - v2
"""Resource rewriter: top-level run/update entry points for the host.

Usage:
    rewriter = ResourceRewriter(host, {"adapter": upload})
    result = await rewriter.run(document)
    rewriter.update(document, result)
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from cdnrewrite.cache.handle import CacheRegistry
from cdnrewrite.config.options import RunOptions, coerce_options
from cdnrewrite.core.models import Document, RewriteResult
from cdnrewrite.extraction.base_extractor import RewriteContext
from cdnrewrite.extraction.extractor_factory import create_extractor, select_kind
from cdnrewrite.logging.context import set_document_context, set_extractor_context
from cdnrewrite.pipeline.virtual_docs import SubDocumentManager, SyntheticDocumentRegistry
from cdnrewrite.resolve.dispatcher import ReferenceResolver
from cdnrewrite.resolve.leaf import UrlResolver
from cdnrewrite.resolve.memo import InvocationMemo

if TYPE_CHECKING:
    from cdnrewrite.config.settings import Settings
    from cdnrewrite.host.base_host import BaseHost

logger = logging.getLogger(__name__)


class ResourceRewriter:
    """Rewrite local resource references of documents into final URLs.

    One instance serves one build run: the invocation memo and in-flight
    tables are run-scoped, while ``caches`` and ``synthetic`` can be shared
    across runs of the same process.

    Args:
        host: Build host (file graph, parser, self-invocation).
        options: Run options, as RunOptions or a host mapping.
        settings: Process settings (product name, cache backend, default adapter).
        caches: Cache namespaces. Created from ``settings`` if None.
        synthetic: Registry of synthetic documents. Fresh one if None.
    """

    def __init__(
        self,
        host: BaseHost,
        options: RunOptions | dict[str, Any] | None = None,
        settings: Settings | None = None,
        caches: CacheRegistry | None = None,
        synthetic: SyntheticDocumentRegistry | None = None,
    ) -> None:
        self._host = host
        self._options = coerce_options(options)
        self._settings = settings
        self._caches = caches if caches is not None else CacheRegistry(settings)
        self._synthetic = synthetic if synthetic is not None else SyntheticDocumentRegistry()
        self._run_id = uuid.uuid4().hex[:12]

        default_adapter = settings.adapter if settings is not None and settings.adapter else None
        self._urls = UrlResolver(
            self._options,
            self._caches,
            host,
            memo=InvocationMemo(),
            default_adapter=default_adapter,
        )
        self._context = RewriteContext(
            host=host,
            options=self._options,
            references=ReferenceResolver(host, self._options),
            urls=self._urls,
            sub_documents=SubDocumentManager(host, self._synthetic),
        )

    @property
    def options(self) -> RunOptions:
        return self._options

    @property
    def caches(self) -> CacheRegistry:
        return self._caches

    @property
    def synthetic(self) -> SyntheticDocumentRegistry:
        return self._synthetic

    @property
    def urls(self) -> UrlResolver:
        return self._urls

    @property
    def run_id(self) -> str:
        return self._run_id

    async def run(self, document: Document) -> RewriteResult:
        """Resolve every reference of ``document``.

        Returns ``{url}`` for other assets, ``{url, content}`` for scripts,
        ``{url, ast}`` for stylesheets and ``{ast}`` for markup.
        """
        set_document_context(document.path, self._run_id)
        kind = select_kind(document, self._host)
        extractor = create_extractor(kind, self._context, referrer=document.path)
        set_extractor_context(extractor.name)
        logger.debug("Rewriting %s as %s", document.path, kind)
        try:
            return await extractor.extract(document)
        except Exception:
            logger.error("Rewrite failed for %s", document.path)
            raise

    def update(self, document: Document, result: RewriteResult) -> None:
        """Commit ``result`` back to the host."""
        host = self._host
        if document.flags.is_template_fragment or host.is_template(document):
            if result.ast is not None:
                host.set_ast(document, result.ast)
            return

        if self._options.not_update_resource or document.flags.suppress_rewrite:
            return

        if document.kind == "script" and result.content is not None:
            host.set_content(document, result.content)
        elif document.kind == "stylesheet" and result.ast is not None:
            host.set_ast(document, result.ast)

    # --- Static configuration ---

    @staticmethod
    def include() -> dict[str, str]:
        """Document kinds this rewriter attaches to by default."""
        return {"kind": "markup"}

    @staticmethod
    def cluster() -> bool:
        """Runs in-process; never spread across worker processes."""
        return False

    @staticmethod
    def cache() -> bool:
        """Opts out of the host's generic cache; manages its own."""
        return False
