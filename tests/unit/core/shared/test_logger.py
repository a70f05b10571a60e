"""Tests for the shared logging formatters."""

import json
import logging

import pytest

from clinic.core.shared import (
    ColoredFormatter,
    CorrelationIdFilter,
    JSONFormatter,
    configure_logging,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("clinic.test", logging.WARNING, __file__, 10, "lookup failed for %s", ("123",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_formats_message_and_extra(self) -> None:
        """Should render the message and keep extra fields apart."""
        data = json.loads(JSONFormatter().format(make_record(document_number="123")))

        assert data["level"] == "WARNING"
        assert data["logger"] == "clinic.test"
        assert data["message"] == "lookup failed for 123"
        assert data["extra"] == {"document_number": "123"}

    def test_omits_empty_extra(self) -> None:
        """Should not add an extra section for plain records."""
        assert "extra" not in json.loads(JSONFormatter().format(make_record()))


class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def test_does_not_mutate_record(self) -> None:
        """Should color a copy so other handlers see the plain level name."""
        record = make_record()

        output = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "\033[33m" in output
        assert record.levelname == "WARNING"



class TestCorrelationIdFilter:
    """Tests for CorrelationIdFilter."""

    def test_stamps_bound_correlation_id(self) -> None:
        """Should copy the bound correlation id onto the record."""
        record = make_record()
        token = set_correlation_id("booking-42")
        try:
            assert CorrelationIdFilter().filter(record) is True
        finally:
            reset_correlation_id(token)

        assert record.correlation_id == "booking-42"
        assert get_correlation_id() is None

    def test_dash_outside_a_request(self) -> None:
        """Should use a placeholder when no request is being handled."""
        record = make_record()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"

    def test_keeps_explicit_correlation_id(self) -> None:
        """Should not overwrite a correlation id passed through extra."""
        record = make_record(correlation_id="from-handler")

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "from-handler"

@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_quiets_http_loggers(self, restore_root_logger) -> None:
        """Should raise noisy library loggers above INFO."""
        configure_logging(level="INFO", format_type="json")

        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_console_lines_carry_correlation_id(self, restore_root_logger) -> None:
        """Should render the bound correlation id in plain log lines."""
        configure_logging(level="INFO", format_type="plain")
        handler = logging.getLogger().handlers[0]
        record = make_record()
        token = set_correlation_id("booking-42")
        try:
            assert handler.filter(record)
        finally:
            reset_correlation_id(token)

        assert "[booking-42] lookup failed for 123" in handler.format(record)
