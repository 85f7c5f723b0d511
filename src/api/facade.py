# src/api/facade.py - v1
"""Public API facade: rewrite a set of documents in one call.

Usage:
    from cdnrewrite.api.facade import rewrite_documents
    results = await rewrite_documents(documents, {"adapter": upload})
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from cdnrewrite.cache.handle import CacheRegistry
from cdnrewrite.config.options import RunOptions
from cdnrewrite.config.settings import Settings
from cdnrewrite.core.errors import ResourceNotFoundError
from cdnrewrite.core.models import Document, RewriteResult
from cdnrewrite.host.memory_host import MemoryHost, Parser
from cdnrewrite.logging.logger import setup_logging
from cdnrewrite.pipeline.rewriter import ResourceRewriter

logger = logging.getLogger(__name__)


def build_pipeline(
    documents: Iterable[Document] = (),
    options: RunOptions | dict[str, Any] | None = None,
    settings: Settings | None = None,
    caches: CacheRegistry | None = None,
    parser: Parser | None = None,
) -> tuple[MemoryHost, ResourceRewriter]:
    """Wire an in-memory host to a rewriter.

    Args:
        documents: Documents making up the build.
        options: Run options (``adapter`` is required before any URL is resolved).
        settings: Process settings. Loaded from .env if None.
        caches: Shared cache namespaces. Created from settings if None.
        parser: Tokenizer for documents registered as raw text.

    Returns:
        (host, rewriter) with the rewriter attached to the host.
    """
    settings = settings or Settings()
    host = MemoryHost(documents, settings=settings, parser=parser)
    rewriter = ResourceRewriter(
        host,
        options,
        settings=settings,
        caches=caches if caches is not None else CacheRegistry(settings),
    )
    host.attach(rewriter)
    return host, rewriter


async def rewrite_documents(
    documents: Iterable[Document],
    options: RunOptions | dict[str, Any] | None = None,
    settings: Settings | None = None,
    caches: CacheRegistry | None = None,
    parser: Parser | None = None,
    paths: Iterable[str] | None = None,
    configure_logging: bool = False,
) -> dict[str, RewriteResult]:
    """Rewrite documents and commit the results back in place.

    Processes ``paths`` if given, otherwise every document of the kind the
    rewriter attaches to by default. Referenced assets are resolved on demand.

    Returns:
        Mapping of processed document path -> RewriteResult.

    Raises:
        ResourceNotFoundError: If a requested path is not among ``documents``.
    """
    settings = settings or Settings()
    if configure_logging:
        setup_logging(
            level=settings.log_level,
            log_format=settings.log_format,
            log_file=settings.log_file,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
        )

    host, rewriter = build_pipeline(documents, options, settings, caches, parser)

    if paths is None:
        kind = ResourceRewriter.include()["kind"]
        targets = [d for d in host.documents if d.kind == kind]
    else:
        targets = []
        for path in paths:
            document = host.get(path)
            if document is None:
                raise ResourceNotFoundError(f"{path} is not part of the build")
            targets.append(document)

    logger.info(
        "Rewriting %d documents (run %s, product %s)",
        len(targets), rewriter.run_id, settings.product,
    )
    results = await asyncio.gather(*(host.invoke_self(d) for d in targets))
    return {d.path: r for d, r in zip(targets, results)}
