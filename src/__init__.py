# src/__init__.py - v1
"""cdnrewrite: rewrite local resource references of build documents into CDN URLs."""

from cdnrewrite.api.facade import build_pipeline, rewrite_documents
from cdnrewrite.core.models import Document, RewriteResult, Token
from cdnrewrite.pipeline.rewriter import ResourceRewriter
from cdnrewrite.version import __version__

__all__ = [
    "Document",
    "ResourceRewriter",
    "RewriteResult",
    "Token",
    "__version__",
    "build_pipeline",
    "rewrite_documents",
]
