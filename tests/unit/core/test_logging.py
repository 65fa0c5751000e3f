"""Unit tests for logging helpers (noted/core/logging.py)."""

import json
import logging
import sys

from noted.core.logging import JSONFormatter, get_log_level, get_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("noted.test", logging.WARNING, __file__, 10, "Warnings from markdown parsing", None, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_nests_extras():
    entry = json.loads(JSONFormatter().format(_record(warnings=["odd input"])))
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "noted.test"
    assert entry["message"] == "Warnings from markdown parsing"
    assert entry["extra"] == {"warnings": ["odd input"]}


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord("noted.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
    entry = json.loads(JSONFormatter().format(record))
    assert entry["exception"]["type"] == "ValueError"
    assert entry["exception"]["message"] == "bad"


def test_get_logger_namespaces():
    assert get_logger("api").name == "noted.api"


def test_get_log_level():
    assert get_log_level("debug") == logging.DEBUG
    assert get_log_level("nonsense") == logging.INFO
