# tests/unit/logging/test_logger.py - v1
"""Tests for logger setup and formatters."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from cdnrewrite.logging.context import clear_context, set_document_context, set_extractor_context
from cdnrewrite.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    create_rotating_handler,
    get_logger,
    parse_size,
    setup_logging,
)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("cdnrewrite.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


@pytest.fixture(autouse=True)
def _reset():
    clear_context()
    yield
    clear_context()
    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.propagate = True


class TestFormatters:
    def test_json_includes_context_and_data(self):
        set_document_context("index.html", run_id="abc")
        payload = json.loads(JsonFormatter().format(_record(data={"n": 2})))
        assert payload["msg"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["document_path"] == "index.html"
        assert payload["run_id"] == "abc"
        assert "extractor" not in payload
        assert payload["data"] == {"n": 2}

    def test_json_without_context(self):
        payload = json.loads(JsonFormatter().format(_record()))
        assert set(payload) == {"ts", "level", "logger", "msg"}

    def test_text_shows_document_and_extractor(self):
        set_document_context("site.css")
        set_extractor_context("CssExtractor")
        line = TextFormatter().format(_record("done"))
        assert "<site.css>" in line
        assert "[CssExtractor]" in line
        assert line.endswith("- done")


class TestParseSize:
    @pytest.mark.parametrize(
        "value,expected",
        [("10MB", 10 * 1024**2), ("512 kb", 512 * 1024), ("1GB", 1024**3), ("4096", 4096)],
    )
    def test_valid(self, value, expected):
        assert parse_size(value) == expected

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid size format"):
            parse_size("ten megs")


class TestSetup:
    def test_get_logger_namespaced(self):
        assert get_logger("cache").name == "cdnrewrite.cache"

    def test_setup_does_not_stack_handlers(self):
        setup_logging(level="DEBUG", log_format="text")
        root = setup_logging(level="DEBUG", log_format="text")
        assert root is logging.getLogger(ROOT_LOGGER)
        assert root.propagate is False
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging(log_file=log_file, rotation="1MB", retention=3)
        handlers = logging.getLogger(ROOT_LOGGER).handlers
        file_handlers = [h for h in handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == 3
        assert log_file.parent.is_dir()
        for h in file_handlers:
            h.close()

    def test_rotating_handler_size(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "x.log", rotation="2KB")
        assert handler.maxBytes == 2048
        handler.close()
