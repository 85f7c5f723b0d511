# src/host/memory_host.py - v2
"""In-memory host: a path -> Document file graph.

Drives the rewriter for the facade and the tests. Each path is processed at
most once per build (per template flag); concurrent requests share the same
task.
"""

from __future__ import annotations

import asyncio
import logging
import posixpath
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from cdnrewrite.config.settings import Settings
from cdnrewrite.core.errors import HostError, ResourceNotFoundError
from cdnrewrite.core.models import Document, DocumentFlags, DocumentKind, RewriteResult, Token
from cdnrewrite.core.render import render_tokens
from cdnrewrite.host.base_host import BaseHost

if TYPE_CHECKING:
    from cdnrewrite.pipeline.rewriter import ResourceRewriter

logger = logging.getLogger(__name__)

Parser = Callable[[Document], list[Token]]

_EXTENSION_KINDS: dict[str, DocumentKind] = {
    "js": "script",
    "mjs": "script",
    "css": "stylesheet",
}


def normalize_path(path: str) -> str:
    """Graph key for ``path``: root-relative, POSIX-normalized."""
    return posixpath.normpath(path.replace("\\", "/").lstrip("/"))


def join_reference(path: str, referrer: str | None = None) -> str:
    """Graph key of ``path`` as referenced from the document ``referrer``.

    Root-absolute paths (``/img/a.png``) ignore the referrer; relative ones
    (``../img/a.png``) are joined onto the referrer's directory.
    """
    path = path.replace("\\", "/")
    if referrer is None or path.startswith("/"):
        return normalize_path(path)
    base = posixpath.dirname(normalize_path(referrer))
    return normalize_path(posixpath.join(base, path))


class MemoryHost(BaseHost):
    """Host backed by an in-memory dictionary of documents.

    Args:
        documents: Initial documents of the build.
        settings: Settings providing template extensions.
        parser: Optional parser for documents registered as raw text.
    """

    def __init__(
        self,
        documents: Iterable[Document] = (),
        settings: Settings | None = None,
        parser: Parser | None = None,
    ) -> None:
        self._settings = settings
        self._parser = parser
        self._files: dict[str, Document] = {}
        self._invocations: dict[tuple[str, bool], asyncio.Task[RewriteResult]] = {}
        self._rewriter: ResourceRewriter | None = None
        self.serialize_calls = 0
        for document in documents:
            self.add(document)

    @classmethod
    def from_directory(
        cls,
        root: Path | str,
        settings: Settings | None = None,
        parser: Parser | None = None,
    ) -> MemoryHost:
        """Load every file under ``root`` as an unparsed document."""
        root = Path(root)
        host = cls(settings=settings, parser=parser)
        for file_path in sorted(p for p in root.rglob("*") if p.is_file()):
            rel = file_path.relative_to(root).as_posix()
            host.add(
                Document(path=rel, kind=host.kind_for_path(rel), content=file_path.read_bytes())
            )
        return host

    # --- Graph ---

    def attach(self, rewriter: ResourceRewriter) -> None:
        """Bind the rewriter that ``invoke_self`` recurses into."""
        self._rewriter = rewriter

    @property
    def documents(self) -> list[Document]:
        return list(self._files.values())

    def kind_for_path(self, path: str) -> DocumentKind:
        ext = posixpath.splitext(path)[1].lstrip(".").lower()
        templates = (
            self._settings.template_extensions_list
            if self._settings is not None
            else ["html", "htm", "tpl", "vm"]
        )
        if ext in templates:
            return "markup"
        return _EXTENSION_KINDS.get(ext, "other")

    def add(self, document: Document) -> Document:
        self._files[normalize_path(document.path)] = document
        return document

    def get(self, path: str) -> Document | None:
        return self._files.get(normalize_path(path))

    def is_template(self, document: Document) -> bool:
        return document.kind == "markup" or document.flags.is_template_fragment

    # --- BaseHost contract ---

    async def get_ast(self, document: Document) -> list[Token]:
        if document.tokens is None:
            if self._parser is None:
                raise HostError(f"No parser configured to tokenize {document.path}")
            document.tokens = self._parser(document)
        return document.tokens

    async def get_content(self, document: Document, binary: bool = False) -> bytes | str:
        if document.tokens is not None:
            self.serialize_calls += 1
            text = render_tokens(document.tokens)
            return text.encode("utf-8") if binary else text
        data = document.content or b""
        return data if binary else data.decode("utf-8")

    def set_ast(self, document: Document, tokens: list[Token]) -> None:
        document.tokens = tokens

    def set_content(self, document: Document, content: bytes | str) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        document.content = content

    async def add_file(
        self,
        path: str,
        payload: list[Token] | bytes | str,
        virtual: bool = True,
    ) -> Document:
        existing = self.get(path)
        if existing is not None:
            return existing
        document = Document(
            path=path,
            kind=self.kind_for_path(path),
            flags=DocumentFlags(is_virtual=virtual),
        )
        if isinstance(payload, list):
            document.tokens = payload
        else:
            document.content = payload.encode("utf-8") if isinstance(payload, str) else payload
        logger.debug("Registered %s document %s", "virtual" if virtual else "", path)
        return self.add(document)

    async def invoke_self(
        self,
        target: str | Document,
        is_tpl: bool = False,
        referrer: str | None = None,
    ) -> RewriteResult:
        if isinstance(target, Document):
            document: Document | None = target
        else:
            document = self._files.get(join_reference(target, referrer))
        if document is None:
            source = f" (referenced from {referrer})" if referrer else ""
            raise ResourceNotFoundError(f"{target} is not part of the build{source}")
        if self._rewriter is None:
            raise HostError("No rewriter attached to host")

        key = (normalize_path(document.path), is_tpl)
        task = self._invocations.get(key)
        if task is None:
            task = asyncio.ensure_future(self._process(document, is_tpl))
            self._invocations[key] = task
        return await asyncio.shield(task)

    async def _process(self, document: Document, is_tpl: bool) -> RewriteResult:
        if is_tpl:
            document.flags.is_template_fragment = True
        result = await self._rewriter.run(document)  # type: ignore[union-attr]
        self._rewriter.update(document, result)  # type: ignore[union-attr]
        return result
