"""Tests for structured logging functionality."""

import json
import logging

from potato_server.logging import (
    HumanReadableFormatter,
    StructuredJSONFormatter,
    clear_log_context,
    get_log_context,
    set_log_context,
)


def _record(msg: str = "Received: ping", level: int = logging.INFO):
    return logging.LogRecord(
        name="potato_server",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestLogContext:
    """Test log context management."""

    def test_set_log_context_updates_existing_fields(self):
        clear_log_context()
        set_log_context(connection_id="abcd1234")
        set_log_context(path="/ws")

        assert get_log_context() == {"connection_id": "abcd1234", "path": "/ws"}

        clear_log_context()

    def test_clear_log_context_removes_fields(self):
        set_log_context(connection_id="abcd1234")
        clear_log_context()

        assert get_log_context() == {}


class TestStructuredJSONFormatter:
    def test_format_includes_standard_and_context_fields(self):
        clear_log_context()
        set_log_context(connection_id="abcd1234")

        data = json.loads(StructuredJSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Received: ping"
        assert data["connection_id"] == "abcd1234"
        assert data["environment"] == "dev"

        clear_log_context()

    def test_format_includes_extra_fields(self):
        record = _record()
        record.recipients = 3

        data = json.loads(StructuredJSONFormatter().format(record))

        assert data["recipients"] == 3

    def test_format_truncates_huge_messages(self):
        data = json.loads(StructuredJSONFormatter().format(_record("x" * 100_000)))

        assert data["message"].endswith("... [TRUNCATED]")
        assert len(data["message"]) < 100_000


class TestHumanReadableFormatter:
    def test_format_includes_connection_id(self):
        clear_log_context()
        set_log_context(connection_id="abcd1234")

        output = HumanReadableFormatter().format(_record())

        assert "[abcd1234]" in output
        assert "INFO: Received: ping" in output

        clear_log_context()

    def test_format_without_connection(self):
        clear_log_context()

        output = HumanReadableFormatter().format(_record(level=logging.ERROR))

        assert "[-]" in output
        assert "ERROR" in output


class TestSetupLogging:
    def test_logging_disabled_under_pytest(self):
        # Holds for `pytest` and `python -m pytest` alike
        assert logging.root.manager.disable >= logging.ERROR
