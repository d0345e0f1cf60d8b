"""Tests for playground.core.logging: formatters and setup."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from playground.core.logging import (
    DevFormatter,
    JSONFormatter,
    SessionLoggerAdapter,
    record_context,
    setup_logging,
)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="playground.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "playground.test"
        assert entry["message"] == "hello"

    def test_session_and_context(self):
        entry = json.loads(JSONFormatter().format(
            _record(session_id="abc123", contract_address="0xdead", phase="deploying")
        ))
        assert entry["session_id"] == "abc123"
        assert entry["contract_address"] == "0xdead"
        assert entry["phase"] == "deploying"

    def test_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"]["type"] == "ValueError"
        assert entry["exception"]["message"] == "bad"


class TestDevFormatter:

    def test_session_prefix(self):
        line = DevFormatter().format(_record(session_id="0123456789abcdef"))
        assert "[01234567] hello" in line
        assert "playground.test" in line

    def test_context_suffix(self):
        line = DevFormatter().format(_record(session_id="abc", module_id="reentrancy", phase=None))
        assert line.endswith("[abc] hello  module_id=reentrancy")


class TestSessionLoggerAdapter:

    def test_call_extra_is_merged_with_session(self, caplog):
        adapter = SessionLoggerAdapter(logging.getLogger("playground.test"), {"session_id": "s1"})
        with caplog.at_level(logging.INFO, logger="playground.test"):
            adapter.info("deployed", extra={"module_id": "m1", "contract_address": "0xabc"})

        record = caplog.records[-1]
        assert record_context(record) == {
            "session_id": "s1",
            "module_id": "m1",
            "contract_address": "0xabc",
        }

    def test_session_binding_wins(self, caplog):
        adapter = SessionLoggerAdapter(logging.getLogger("playground.test"), {"session_id": "s1"})
        with caplog.at_level(logging.INFO, logger="playground.test"):
            adapter.info("hi", extra={"session_id": "other"})
        assert caplog.records[-1].session_id == "s1"


class TestSetupLogging:

    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_production_uses_json(self):
        setup_logging("production", "DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_development_uses_dev_formatter(self):
        setup_logging("development")
        assert isinstance(logging.getLogger().handlers[0].formatter, DevFormatter)
        assert logging.getLogger("redis").level == logging.WARNING
