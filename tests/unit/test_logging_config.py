"""
Tests for logging setup and structured error aggregation
"""

import logging
from unittest.mock import patch

import colorlog
import pytest

from twitch_chat.logs import (
    ErrorAggregator,
    LoggerConfigurator,
    error_aggregator,
    log_structured_error,
)
from twitch_chat.logs.logging_config import is_debug_enabled


class TestErrorAggregator:
    def setup_method(self):
        self.aggregator = ErrorAggregator()

    def test_record_and_summary(self):
        self.aggregator.record_error("join", "first", {"channel": "#a"})
        self.aggregator.record_error("join", "second")
        summary = self.aggregator.get_error_summary()
        assert summary["join"]["total_count"] == 2
        assert summary["join"]["recent_count"] == 2
        assert summary["join"]["last_occurrence"]["message"] == "second"
        assert self.aggregator.count("join") == 2
        assert self.aggregator.count("other") == 0

    def test_rate_per_hour(self):
        assert self.aggregator.rate_per_hour("join") == 0
        for _ in range(3):
            self.aggregator.record_error("join", "boom")
        # Runtimes under an hour count as one hour
        assert self.aggregator.rate_per_hour("join") == 3

    def test_history_is_bounded(self):
        with patch("twitch_chat.logs.logging_config.ERROR_HISTORY_LIMIT", 2):
            for i in range(5):
                self.aggregator.record_error("join", f"boom {i}")
        assert self.aggregator.count("join") == 2
        assert self.aggregator.get_error_summary()["join"]["last_occurrence"]["message"] == "boom 4"

    def test_reset(self):
        self.aggregator.record_error("join", "boom")
        self.aggregator.reset()
        assert self.aggregator.get_error_summary() == {}

    def test_summary_report_logs(self, caplog):
        self.aggregator.record_error("transport", "closed")
        with caplog.at_level(logging.WARNING):
            self.aggregator.log_summary_report()
        assert any("transport" in r.getMessage() for r in caplog.records)


class TestLogStructuredError:
    def test_message_format_and_aggregation(self, caplog):
        with caplog.at_level(logging.ERROR):
            log_structured_error(
                "join", "Failed to send JOIN", ValueError("bad"), context={"channel": "#a"}
            )
        message = caplog.records[-1].getMessage()
        assert message.startswith("[JOIN] Failed to send JOIN")
        assert "ValueError: bad" in message
        assert "channel=#a" in message
        assert error_aggregator.count("join") == 1

    def test_high_rate_logs_critical_alert(self, caplog):
        with patch("twitch_chat.logs.logging_config.ERROR_ALERT_RATE_PER_HOUR", 1):
            with caplog.at_level(logging.ERROR):
                log_structured_error("transport", "closed")
                assert not any(r.levelno == logging.CRITICAL for r in caplog.records)
                log_structured_error("transport", "closed again")
        assert caplog.records[-1].levelno == logging.CRITICAL
        assert "HIGH ERROR RATE ALERT: transport" in caplog.records[-1].getMessage()

    def test_custom_level(self, caplog):
        with caplog.at_level(logging.DEBUG):
            log_structured_error("handshake", "retrying", level=logging.WARNING)
        assert caplog.records[-1].levelno == logging.WARNING


class TestLoggerConfigurator:
    @pytest.mark.parametrize(
        "value, expected", [("true", True), ("1", True), ("YES", True), ("false", False), ("", False)]
    )
    def test_is_debug_enabled(self, monkeypatch, value, expected):
        monkeypatch.setenv("DEBUG", value)
        assert is_debug_enabled() is expected

    def test_configure_uses_colorlog(self, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            root.handlers[:] = []
            with patch("twitch_chat.logs.logging_config.atexit.register") as register:
                LoggerConfigurator({"level": logging.WARNING}).configure()
            assert root.level == logging.WARNING
            assert any(isinstance(h.formatter, colorlog.ColoredFormatter) for h in root.handlers)
            assert logging.getLogger("websockets").level == logging.INFO
            register.assert_called_once()
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_summary_on_exit_disabled(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            root.handlers[:] = []
            with patch("twitch_chat.logs.logging_config.atexit.register") as register:
                LoggerConfigurator({"summary_on_exit": False}).configure()
            register.assert_not_called()
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
