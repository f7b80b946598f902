"""Tests for JSON logging."""

import json
import logging
from io import StringIO

from hn_stories.core.logging import _JsonFormatter, get_logger, setup_logging


def test_setup_logging_creates_handler():
    """Test that setup_logging adds a handler."""
    root = logging.getLogger()
    initial_handlers = len(root.handlers)
    setup_logging()
    setup_logging()
    json_handlers = [h for h in root.handlers if isinstance(h.formatter, _JsonFormatter)]
    assert len(root.handlers) >= initial_handlers
    assert len(json_handlers) == 1


def test_get_logger_returns_logger():
    """Test that get_logger returns a logger instance."""
    logger = get_logger("test")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "test"


def _capture(name: str):
    logger = get_logger(name)
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(_JsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger, stream


def test_json_formatter_produces_json():
    """Test that logs are formatted as JSON."""
    logger, stream = _capture("test.json")

    logger.info("Test message")

    parsed = json.loads(stream.getvalue().strip())
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "test.json"
    assert parsed["msg"] == "Test message"


def test_json_formatter_includes_extra_fields():
    logger, stream = _capture("test.json.extra")

    logger.info("request", extra={"path": "/health", "status": 200})

    parsed = json.loads(stream.getvalue().strip())
    assert parsed["path"] == "/health"
    assert parsed["status"] == 200
    assert "args" not in parsed
