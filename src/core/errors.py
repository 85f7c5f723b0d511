# src/core/errors.py - v1
"""Exception hierarchy for the rewrite engine.

Configuration problems are fatal and never retried. Malformed tokens point
at an upstream parser contract violation and fail the whole document.
Resolution failures propagate through the join point of the enclosing
document.
"""

from __future__ import annotations


class RewriteError(Exception):
    """Base class for all rewrite engine errors."""


class FatalError(RewriteError):
    """Aborts processing of the current document with a labeled message."""

    def __init__(self, message: str, label: str = "cdnrewrite") -> None:
        super().__init__(message)
        self.label = label

    def __str__(self) -> str:
        return f"[{self.label}] {self.args[0]}"


class AdapterConfigurationError(FatalError):
    """Raised when the resolution adapter is missing or not callable."""


class MalformedTokenError(RewriteError):
    """Raised when a tag-start token carries no attribute table."""


class ResolutionError(RewriteError):
    """Raised when a reference cannot be turned into a final URL."""


class HostError(RewriteError):
    """Raised when the host cannot satisfy a contract call."""


class ResourceNotFoundError(HostError):
    """Raised when a referenced path is not part of the file graph."""
