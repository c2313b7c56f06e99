# tests/unit/test_logging_config.py
"""
Unit tests for stderr JSON logging and the store write retry predicate.
"""

import json
import logging
import sqlite3

import pytest

from site_planner.logging_config import LIBRARY_LOGGERS, JsonFormatter, configure_logging
from site_planner.planning.retry import is_retryable


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter():
    record = logging.LogRecord(
        "site_planner.test", logging.WARNING, __file__, 1, "renumbered %d rows", (3,), None
    )
    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["logger"] == "site_planner.test"
    assert data["msg"] == "renumbered 3 rows"
    assert "ts" in data


@pytest.mark.parametrize(
    "verbosity,level",
    [("quiet", logging.WARNING), ("normal", logging.INFO), ("verbose", logging.DEBUG)],
)
def test_configure_logging_levels(restore_root_logger, verbosity, level):
    configure_logging(verbosity)

    root = logging.getLogger()
    assert root.level == level
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)


def test_retryable_errors():
    assert is_retryable(sqlite3.OperationalError("database is locked"))
    assert is_retryable(sqlite3.OperationalError("Database is busy"))
    assert not is_retryable(sqlite3.OperationalError("no such table: sub_phases"))
    assert not is_retryable(ValueError("Sub-phase x not found"))


def test_library_loggers_stay_at_info(restore_root_logger):
    configure_logging("verbose")

    for name in LIBRARY_LOGGERS:
        library_logger = logging.getLogger(name)
        assert library_logger.level == logging.INFO
        assert library_logger.propagate is False
