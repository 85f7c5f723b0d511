# src/extraction/base_extractor.py - v2
"""Abstract extractor interface for document kinds."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cdnrewrite.core.models import Document, DocumentKind, RewriteResult

if TYPE_CHECKING:
    from cdnrewrite.config.options import RunOptions
    from cdnrewrite.host.base_host import BaseHost
    from cdnrewrite.pipeline.virtual_docs import SubDocumentManager
    from cdnrewrite.resolve.dispatcher import ReferenceResolver
    from cdnrewrite.resolve.leaf import UrlResolver


@dataclass
class RewriteContext:
    """Collaborators shared by every extractor of one build run."""

    host: BaseHost
    options: RunOptions
    references: ReferenceResolver
    urls: UrlResolver
    sub_documents: SubDocumentManager


class BaseExtractor(ABC):
    """Unified interface for per-kind reference extractors.

    An extractor discovers every candidate reference of a document, issues
    all resolutions at once and reassembles the document after the join.

    Args:
        context: Collaborators of the build run.
        referrer: Path of the document being rewritten. Relative references
            are resolved from its directory.
    """

    def __init__(self, context: RewriteContext, referrer: str | None = None) -> None:
        self._context = context
        self._referrer = referrer

    @property
    @abstractmethod
    def kind(self) -> DocumentKind:
        """Document kind this extractor handles."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def referrer(self) -> str | None:
        return self._referrer

    @abstractmethod
    async def extract(self, document: Document) -> RewriteResult:
        """Resolve every reference of ``document`` and return the rewrite result."""

    async def resolve(self, path: str) -> str:
        """Replacement text for one reference path."""
        return await self._context.references.resolve(path, self._referrer)
