# src/core/render.py - v2
"""In-memory token rendering.

Used as the default serializer by hosts and to compute the notional content
of virtual documents without asking the host for physical output.
"""

from __future__ import annotations

from cdnrewrite.core.models import Attribute, ContentExt, EmbeddedExt, TagStartExt, Token


def render_tokens(tokens: list[Token]) -> str:
    """Render a token stream back to text."""
    return "".join(render_token(token) for token in tokens)


def render_token(token: Token) -> str:
    """Render one token.

    Tag starts keep their source text unless an attribute was rewritten (or
    there is no source text); only then are they rebuilt from the table.
    """
    ext = token.ext
    if isinstance(ext, TagStartExt) and ext.attrs is not None:
        if ext.modified or not token.value:
            return _render_tag_start(ext)
        return token.value
    if isinstance(ext, EmbeddedExt):
        parts = [render_token(ext.start), _render_content(ext.content)]
        if ext.end is not None:
            parts.append(render_token(ext.end))
        return "".join(parts)
    return token.value


def _render_content(content: Token) -> str:
    if isinstance(content.ext, ContentExt) and content.ext.tokens is not None:
        return render_tokens(content.ext.tokens)
    return content.value


def _render_tag_start(ext: TagStartExt) -> str:
    parts = [f"<{ext.tag}"]
    for attr in ext.attrs or []:
        parts.append(f" {_render_attribute(attr)}")
    parts.append(" />" if ext.self_closing else ">")
    return "".join(parts)


def _render_attribute(attr: Attribute) -> str:
    if attr.value is None:
        return attr.name
    return f"{attr.name}={attr.quote}{attr.value}{attr.quote}"
