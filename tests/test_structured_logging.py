"""Tests for StructuredFormatter and configure_logging."""
import json
import logging

import pytest

from export_queue.utils.logging import StructuredFormatter, configure_logging


def _record(msg="hello %s", args=("world",), **extra):
    record = logging.LogRecord("export_queue.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_line():
    payload = json.loads(StructuredFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "export_queue.test"
    assert payload["message"] == "hello world"
    assert "timestamp" in payload
    assert "metrics" not in payload


def test_formatter_includes_metrics():
    record = _record(metrics={"job_id": "abc", "elapsed_ms": 12.5})
    payload = json.loads(StructuredFormatter().format(record))
    assert payload["metrics"] == {"job_id": "abc", "elapsed_ms": 12.5}


def test_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        import sys

        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    payload = json.loads(StructuredFormatter().format(record))
    assert "RuntimeError: boom" in payload["exception"]


@pytest.mark.parametrize("fmt, formatter_type", [
    ("json", StructuredFormatter),
    ("structured", logging.Formatter),
])
def test_configure_logging(restore_root_logger, fmt, formatter_type):
    configure_logging("debug", fmt)
    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert type(root.handlers[0].formatter) is formatter_type
