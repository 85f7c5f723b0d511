# src/logging/logger.py - v1
"""Log formatters, file rotation and one-call setup for the ``cdnrewrite`` logger tree.

Every record is enriched with the document being rewritten, the build run and
the active extractor, so interleaved output of concurrent documents can be
told apart.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from cdnrewrite.logging.context import get_context

ROOT_LOGGER = "cdnrewrite"

_SIZE_RE = re.compile(r"^(\d+)\s*([KMG]?B)?$", re.IGNORECASE)
_SIZE_UNITS = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; context fields are flattened to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(get_context().as_dict())

        data = getattr(record, "data", None)
        if data:
            payload["data"] = data
        if record.exc_info and record.exc_info[1] is not None:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """``time level logger <document> [extractor] - message`` for terminals."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s%(ctx)s - %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        tags = ""
        if ctx.document_path:
            tags += f" <{ctx.document_path}>"
        if ctx.extractor:
            tags += f" [{ctx.extractor}]"
        record.ctx = tags
        return super().format(record)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``cdnrewrite`` tree (``get_logger("cache")`` -> ``cdnrewrite.cache``)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def parse_size(size: str) -> int:
    """Byte count of ``"10MB"``, ``"512 kb"`` or a bare ``"4096"``."""
    match = _SIZE_RE.match(size.strip())
    if not match:
        raise ValueError(f"Invalid size format: {size!r}. Use e.g. '10MB'.")
    unit = (match.group(2) or "B").upper()
    return int(match.group(1)) * _SIZE_UNITS[unit]


def create_rotating_handler(
    log_file: str | Path,
    rotation: str = "10MB",
    retention: int = 30,
) -> RotatingFileHandler:
    """Size-rotated file handler keeping ``retention`` old files."""
    target = Path(log_file).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        target,
        maxBytes=parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
    )


def _build_handlers(
    formatter: logging.Formatter,
    log_file: str | Path | None,
    rotation: str,
    retention: int,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(create_rotating_handler(log_file, rotation, retention))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> logging.Logger:
    """Configure the ``cdnrewrite`` logger; safe to call more than once.

    Output goes to stderr, plus a rotating file when ``log_file`` is set.
    Records do not propagate to the host application's root logger.

    Returns:
        The configured ``cdnrewrite`` logger.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.getLevelName(level.upper()))
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    for handler in _build_handlers(formatter, log_file, rotation, retention):
        root.addHandler(handler)
    return root
