"""
Tests for structured logging configuration and JSON formatter.
"""
import json
import logging
from unittest.mock import patch

import pytest

from checkin.core.config import settings
from checkin.core.logging_config import (
    JSONFormatter,
    RequestIdFilter,
    build_logging_config,
    request_id_context,
    setup_logging,
)


def make_record(msg="Test message", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="checkin.test",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """Tests for the JSONFormatter class."""

    def test_basic_log_entry(self):
        """Test that basic log entry produces valid JSON with required fields."""
        log_entry = json.loads(JSONFormatter().format(make_record()))

        assert "timestamp" in log_entry
        assert log_entry["level"] == "INFO"
        assert log_entry["service"] == settings.APP_NAME
        assert log_entry["logger"] == "checkin.test"
        assert log_entry["message"] == "Test message"
        assert "source" not in log_entry

    def test_request_id_from_context(self):
        """Test that request_id is included when set in context."""
        token = request_id_context.set("req-123")
        try:
            log_entry = json.loads(JSONFormatter().format(make_record()))
        finally:
            request_id_context.reset(token)

        assert log_entry["request_id"] == "req-123"

    def test_no_request_id_when_not_set(self):
        token = request_id_context.set(None)
        try:
            log_entry = json.loads(JSONFormatter().format(make_record()))
        finally:
            request_id_context.reset(token)

        assert "request_id" not in log_entry

    def test_check_in_fields_from_extra(self):
        """Submission logs carry user, quiz and classification."""
        record = make_record("Check-in recorded")
        record.user_id = 7
        record.quiz_id = 3
        record.classification = "recover"
        record.duration_ms = 15.5

        log_entry = json.loads(JSONFormatter().format(record))

        assert log_entry["user_id"] == 7
        assert log_entry["quiz_id"] == 3
        assert log_entry["classification"] == "recover"
        assert log_entry["duration_ms"] == pytest.approx(15.5)

    def test_unlisted_extra_fields_are_dropped(self):
        record = make_record()
        record.answers = ["PAIN_STRONG"]

        assert "answers" not in json.loads(JSONFormatter().format(record))

    def test_source_and_exception_for_errors(self):
        try:
            raise ValueError("broken")
        except ValueError:
            import sys

            record = make_record("Failure", logging.ERROR, sys.exc_info())

        log_entry = json.loads(JSONFormatter().format(record))

        assert log_entry["source"] == "test.py:10"
        assert "ValueError: broken" in log_entry["exception"]


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_formatter_in_production(self):
        with patch("checkin.core.logging_config.settings") as settings, patch(
            "logging.config.dictConfig"
        ) as dict_config:
            settings.LOG_LEVEL = "INFO"
            settings.ENV = "production"
            settings.DEBUG = False
            setup_logging()

        config = dict_config.call_args.args[0]
        assert config["handlers"]["console"]["formatter"] == "json"
        assert config["loggers"]["checkin"]["level"] == logging.INFO

    def test_plain_formatter_in_development(self):
        with patch("checkin.core.logging_config.settings") as settings, patch(
            "logging.config.dictConfig"
        ) as dict_config:
            settings.LOG_LEVEL = "DEBUG"
            settings.ENV = "development"
            settings.DEBUG = True
            setup_logging()

        config = dict_config.call_args.args[0]
        assert config["handlers"]["console"]["formatter"] == "default"
        assert config["root"]["level"] == logging.DEBUG


class TestRequestIdFilter:
    """The readable format needs request_id on every record."""

    def test_sets_current_request_id(self):
        record = make_record()
        token = request_id_context.set("req-9")
        try:
            assert RequestIdFilter().filter(record) is True
        finally:
            request_id_context.reset(token)

        assert record.request_id == "req-9"

    def test_placeholder_outside_a_request(self):
        record = make_record()
        token = request_id_context.set(None)
        try:
            RequestIdFilter().filter(record)
        finally:
            request_id_context.reset(token)

        assert record.request_id == "-"


class TestBuildLoggingConfig:
    """Tests for the dictConfig builder."""

    def test_console_handler_uses_request_id_filter(self):
        config = build_logging_config(logging.INFO, json_output=False)

        assert config["handlers"]["console"]["filters"] == ["request_id"]
        assert "%(request_id)s" in config["formatters"]["default"]["format"]

    def test_access_log_is_quiet(self):
        config = build_logging_config(logging.DEBUG, json_output=True)

        assert config["loggers"]["uvicorn.access"]["level"] == logging.WARNING
        assert config["loggers"]["checkin"]["propagate"] is False
