# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides token builders, a recording adapter, in-memory settings and a
ready-wired host/rewriter pair. No external dependencies; all I/O is in memory.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from cdnrewrite.api.facade import build_pipeline
from cdnrewrite.config.settings import Settings
from cdnrewrite.core.models import (
    Attribute,
    ContentExt,
    Document,
    EmbeddedExt,
    TagStartExt,
    Token,
)
from cdnrewrite.core.render import render_token, render_tokens


# === Token builders ===


def make_tag(
    tag: str,
    attrs: dict[str, str | None] | None = None,
    **flags: Any,
) -> Token:
    """html_tag_start token with a parsed attribute table."""
    attributes = [Attribute(name=k, value=v) for k, v in (attrs or {}).items()]
    token = Token(
        type="html_tag_start",
        ext=TagStartExt(tag=tag, attrs=attributes, **flags),
    )
    token.value = render_token(token)
    return token


def make_text(value: str) -> Token:
    return Token(type="html_text", value=value)


def make_css(*declarations: tuple[str, str], selector: str = ".a") -> list[Token]:
    """One rule block: ``selector{prop:value;...}``."""
    tokens = [
        Token(type="css_selector", value=selector),
        Token(type="css_brace_start", value="{"),
    ]
    for prop, value in declarations:
        tokens += [
            Token(type="css_property", value=prop),
            Token(type="css_colon", value=":"),
            Token(type="css_value", value=value),
            Token(type="css_semicolon", value=";"),
        ]
    tokens.append(Token(type="css_brace_end", value="}"))
    return tokens


def make_script_block(
    body: str = "",
    src: str | None = None,
    is_tpl: bool = False,
    tokens: list[Token] | None = None,
) -> Token:
    attrs: dict[str, str | None] = {}
    if src is not None:
        attrs["src"] = src
    if is_tpl:
        attrs["type"] = "text/html"
    start = make_tag("script", attrs, is_external=src is not None, is_tpl=is_tpl)
    return Token(
        type="html_tag_script",
        ext=EmbeddedExt(
            start=start,
            content=Token(type="html_text", value=body, ext=ContentExt(tokens=tokens)),
            end=Token(type="html_tag_end", value="</script>"),
        ),
    )


def make_style_block(tokens: list[Token], body: str | None = None) -> Token:
    return Token(
        type="html_tag_style",
        ext=EmbeddedExt(
            start=make_tag("style"),
            content=Token(
                type="html_text",
                value=body if body is not None else render_tokens(tokens),
                ext=ContentExt(tokens=tokens),
            ),
            end=Token(type="html_tag_end", value="</style>"),
        ),
    )


# === Adapter ===


class RecordingAdapter:
    """Async adapter mapping a path to ``<prefix><path>`` and recording calls."""

    def __init__(
        self,
        prefix: str = "https://cdn.example",
        mapping: dict[str, str] | None = None,
    ) -> None:
        self.prefix = prefix
        self.mapping = mapping or {}
        self.calls: list[tuple[str, bytes | str]] = []

    async def __call__(self, content, path, options, cache) -> str:
        self.calls.append((path, content))
        if path in self.mapping:
            return self.mapping[path]
        return f"{self.prefix}{path if path.startswith('/') else '/' + path}"

    @property
    def paths(self) -> list[str]:
        return [p for p, _ in self.calls]


# === FIXTURES ===


@pytest.fixture
def settings() -> Settings:
    """In-memory cache, no .env."""
    return Settings(_env_file=None, cache_backend="memory")


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def pipeline(settings, adapter):
    """Factory: (documents, **options) -> (host, rewriter) using ``adapter``."""

    def _build(documents=(), **options):
        options.setdefault("adapter", adapter)
        return build_pipeline(documents, options, settings)

    return _build


@pytest.fixture
def asset():
    """Factory for binary documents."""

    def _asset(path: str, content: bytes = b"\x89PNG") -> Document:
        return Document(path=path, kind="other", content=content)

    return _asset


@pytest.fixture
def adapter_factory():
    """RecordingAdapter class, for tests needing a custom prefix or mapping."""
    return RecordingAdapter


@pytest.fixture
def tok() -> SimpleNamespace:
    """Token builders: tag, text, css, script, style."""
    return SimpleNamespace(
        tag=make_tag,
        text=make_text,
        css=make_css,
        script=make_script_block,
        style=make_style_block,
    )
