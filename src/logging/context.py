# src/logging/context.py - v1
"""Contextual logging support: attach document path, run id and extractor to records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set per document run. asyncio tasks copy the context they were created in,
# so concurrently rewritten child documents keep their own values.
_document_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_path", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_extractor: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "extractor", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    document_path: str | None = None
    run_id: str | None = None
    extractor: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        document_path=_document_path.get(),
        run_id=_run_id.get(),
        extractor=_extractor.get(),
        step=_step.get(),
    )


def set_document_context(document_path: str, run_id: str | None = None) -> None:
    """Set document-level context (called once per document run)."""
    _document_path.set(document_path)
    if run_id is not None:
        _run_id.set(run_id)


def set_extractor_context(extractor: str, step: str | None = None) -> None:
    """Set extractor-level context."""
    _extractor.set(extractor)
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _document_path.set(None)
    _run_id.set(None)
    _extractor.set(None)
    _step.set(None)
