# src/extraction/extractor_factory.py - v3
"""Factory: instantiate the extractor for a document kind.

This is the single dispatch point on document kind. The kinds form a closed
set and each one has exactly one registered extractor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cdnrewrite.core.models import Document, DocumentKind
from cdnrewrite.extraction.base_extractor import BaseExtractor, RewriteContext
from cdnrewrite.extraction.binary_extractor import BinaryExtractor
from cdnrewrite.extraction.css_extractor import CssExtractor
from cdnrewrite.extraction.html_extractor import HtmlExtractor
from cdnrewrite.extraction.js_extractor import JsExtractor

if TYPE_CHECKING:
    from cdnrewrite.host.base_host import BaseHost

# Registry maps document kind -> extractor class.
_EXTRACTOR_REGISTRY: dict[DocumentKind, type[BaseExtractor]] = {
    "markup": HtmlExtractor,
    "script": JsExtractor,
    "stylesheet": CssExtractor,
    "other": BinaryExtractor,
}


class UnsupportedKindError(ValueError):
    """Raised when no extractor is registered for a kind."""


def select_kind(document: Document, host: BaseHost) -> DocumentKind:
    """Kind used for dispatch. Template fragments are markup whatever their path."""
    if document.flags.is_template_fragment or host.is_template(document):
        return "markup"
    return document.kind


def create_extractor(
    kind: DocumentKind, context: RewriteContext, referrer: str | None = None
) -> BaseExtractor:
    """Create the extractor for ``kind``, bound to the ``referrer`` document path.

    Raises:
        UnsupportedKindError: If no extractor is registered.
    """
    cls = _EXTRACTOR_REGISTRY.get(kind)
    if cls is None:
        raise UnsupportedKindError(
            f"No extractor for kind {kind!r}. "
            f"Supported: {', '.join(sorted(_EXTRACTOR_REGISTRY))}"
        )
    return cls(context, referrer)


def register_extractor(kind: DocumentKind, cls: type[BaseExtractor]) -> None:
    """Replace the extractor used for a kind."""
    _EXTRACTOR_REGISTRY[kind] = cls


def supported_kinds() -> list[str]:
    return sorted(_EXTRACTOR_REGISTRY.keys())
