# src/core/models.py - v2
"""Shared Pydantic domain models used across modules.

Documents and tokens are built by the host's parser before the rewriter runs.
The rewriter mutates token payloads in place and never adds or removes tokens.
"""

from __future__ import annotations

import posixpath
from typing import Literal, Union

from pydantic import BaseModel, Field


# === DOCUMENT KINDS ===

DocumentKind = Literal["markup", "script", "stylesheet", "other"]

# === TOKEN TYPES ===
# Parsers may emit any other type (doctype, cdata, @import ...); the
# rewriter leaves those tokens untouched.

HTML_TAG_START = "html_tag_start"
HTML_TAG_SCRIPT = "html_tag_script"
HTML_TAG_STYLE = "html_tag_style"
CSS_PROPERTY = "css_property"
CSS_VALUE = "css_value"


# === TOKEN MODELS ===


class Attribute(BaseModel):
    """Single markup attribute as parsed (value None for boolean attributes)."""

    name: str
    value: str | None = None
    quote: Literal['"', "'", ""] = '"'


class TagStartExt(BaseModel):
    """Payload of an ``html_tag_start`` token.

    ``modified`` is set once an attribute value was rewritten; until then the
    token's source text is authoritative.
    """

    tag: str
    tag_lower: str = ""
    attrs: list[Attribute] | None = None
    is_external: bool = False
    is_tpl: bool = False
    self_closing: bool = False
    modified: bool = False

    def model_post_init(self, __context: object) -> None:
        if not self.tag_lower:
            self.tag_lower = self.tag.lower()


class ContentExt(BaseModel):
    """Payload of the content slot of an embedded script/style block."""

    tokens: list[Token] | None = None


class EmbeddedExt(BaseModel):
    """Payload of ``html_tag_script`` / ``html_tag_style`` tokens."""

    start: Token
    content: Token
    end: Token | None = None


class Token(BaseModel):
    """Typed node of a parsed document."""

    type: str = Field(min_length=1)
    value: str = ""
    ext: Union[TagStartExt, EmbeddedExt, ContentExt, None] = None


ContentExt.model_rebuild()
EmbeddedExt.model_rebuild()
Token.model_rebuild()


# === DOCUMENT ===


class DocumentFlags(BaseModel):
    """Per-document processing flags."""

    is_virtual: bool = False
    suppress_rewrite: bool = False
    is_template_fragment: bool = False


class Document(BaseModel):
    """One logical file flowing through the build pipeline."""

    path: str
    kind: DocumentKind = "other"
    content: bytes | None = None
    tokens: list[Token] | None = None
    flags: DocumentFlags = Field(default_factory=DocumentFlags)

    @property
    def extname(self) -> str:
        """Lower-case extension without the leading dot."""
        return posixpath.splitext(self.path)[1].lstrip(".").lower()


# === RESULTS ===


class RewriteResult(BaseModel):
    """Outcome of running the rewriter on one document.

    Shapes by document kind:
      - other:      url
      - script:     url, content
      - stylesheet: url, ast
      - markup:     ast
    """

    url: str | None = None
    content: str | None = None
    ast: list[Token] | None = None

    @classmethod
    def for_other(cls, url: str) -> RewriteResult:
        return cls(url=url)

    @classmethod
    def for_script(cls, url: str, content: str) -> RewriteResult:
        return cls(url=url, content=content)

    @classmethod
    def for_stylesheet(cls, url: str | None, ast: list[Token]) -> RewriteResult:
        return cls(url=url, ast=ast)

    @classmethod
    def for_markup(cls, ast: list[Token]) -> RewriteResult:
        return cls(ast=ast)
