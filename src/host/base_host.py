# src/host/base_host.py - v2
"""Abstract host interface.

The host owns the file graph, the parser and the serializer. The rewriter
only talks to it through this contract, so any build tool can drive the
engine by implementing the abstract methods below.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import NoReturn

from cdnrewrite.core.errors import FatalError
from cdnrewrite.core.models import Attribute, Document, RewriteResult, Token
from cdnrewrite.resolve.exclusion import matches_exclusion

logger = logging.getLogger(__name__)


class BaseHost(ABC):
    """Unified interface for build hosts."""

    @abstractmethod
    async def get_ast(self, document: Document) -> list[Token]:
        """Parsed token stream of ``document`` (parsing on demand)."""

    @abstractmethod
    async def get_content(self, document: Document, binary: bool = False) -> bytes | str:
        """Physical content of ``document``, serialized from its tokens if any."""

    @abstractmethod
    def set_ast(self, document: Document, tokens: list[Token]) -> None:
        """Replace the token stream of ``document``."""

    @abstractmethod
    def set_content(self, document: Document, content: bytes | str) -> None:
        """Replace the raw content of ``document``."""

    @abstractmethod
    async def add_file(
        self,
        path: str,
        payload: list[Token] | bytes | str,
        virtual: bool = True,
    ) -> Document:
        """Register a (synthetic) document, or return the existing one for ``path``."""

    @abstractmethod
    async def invoke_self(
        self,
        target: str | Document,
        is_tpl: bool = False,
        referrer: str | None = None,
    ) -> RewriteResult:
        """Process ``target`` as a file through the pipeline and return its result.

        A relative string ``target`` is looked up from the directory of
        ``referrer``, the document it was referenced from. Idempotent per
        path within a build.
        """

    # --- Helpers with default behaviour ---

    def is_template(self, document: Document) -> bool:
        return document.kind == "markup"

    @staticmethod
    def get_attr_value(attrs: list[Attribute], name: str) -> str | None:
        """Value of the first attribute called ``name`` (case-insensitive)."""
        name = name.lower()
        for attr in attrs:
            if attr.name.lower() == name:
                return attr.value
        return None

    @staticmethod
    def set_attr_value(attrs: list[Attribute], name: str, value: str) -> None:
        """Set the first attribute called ``name``, appending it if missing."""
        lowered = name.lower()
        for attr in attrs:
            if attr.name.lower() == lowered:
                attr.value = value
                return
        attrs.append(Attribute(name=name, value=value))

    def match_exclusion(
        self, path: str, patterns: Iterable[str | re.Pattern[str]]
    ) -> bool:
        return matches_exclusion(path, patterns)

    def fatal(self, error: FatalError | str) -> NoReturn:
        """Abort processing of the current document."""
        if isinstance(error, str):
            error = FatalError(error)
        logger.error("%s", error)
        raise error
