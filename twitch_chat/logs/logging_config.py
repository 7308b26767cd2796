"""
Logging configuration for the Twitch chat session layer.

Provides a colorlog based console setup plus structured error logging with
per-category aggregation. Failures that have no caller to propagate to
(background joins, event handlers) are reported through
``log_structured_error``.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
import threading
import time
from collections import deque
from typing import Any

import colorlog

from ..constants import ERROR_ALERT_RATE_PER_HOUR, ERROR_HISTORY_LIMIT


def is_debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


class ErrorAggregator:
    """Per-category error counters for unattended failures.

    Keeps a bounded history of recent occurrences per category so a rate can
    be computed, and renders a summary when the process exits. Safe to call
    from transport callbacks running on another thread.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.errors: dict[str, deque[dict[str, Any]]] = {}
        self.start_time = time.time()

    def record_error(
        self, error_type: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        """Record an error occurrence with context."""
        entry = {"timestamp": time.time(), "message": message, "context": context or {}}
        with self.lock:
            history = self.errors.get(error_type)
            if history is None:
                history = self.errors[error_type] = deque(maxlen=ERROR_HISTORY_LIMIT)
            history.append(entry)

    def count(self, error_type: str) -> int:
        with self.lock:
            return len(self.errors.get(error_type, ()))

    def rate_per_hour(self, error_type: str) -> float:
        """Errors per hour in one category since start or the last reset."""
        runtime_hours = (time.time() - self.start_time) / 3600
        return self.count(error_type) / max(runtime_hours, 1)

    def get_error_summary(self) -> dict[str, Any]:
        """Counts, last-hour counts and the latest occurrence per category."""
        now = time.time()
        with self.lock:
            snapshot = {name: list(history) for name, history in self.errors.items()}
        return {
            name: {
                "total_count": len(history),
                "recent_count": sum(1 for e in history if now - e["timestamp"] < 3600),
                "rate_per_hour": self.rate_per_hour(name),
                "last_occurrence": history[-1] if history else None,
            }
            for name, history in snapshot.items()
        }

    def reset(self) -> None:
        with self.lock:
            self.errors.clear()
            self.start_time = time.time()

    def log_summary_report(self) -> None:
        summary = self.get_error_summary()
        if not summary:
            logging.info("No errors recorded in current session")
            return
        logging.warning("🚨 ERROR SUMMARY REPORT")
        for error_type, stats in summary.items():
            logging.warning(
                f"  {error_type}: {stats['total_count']} total, "
                f"{stats['recent_count']} in last hour, "
                f"{stats['rate_per_hour']:.1f}/hour"
            )
            if stats["last_occurrence"]:
                logging.warning(f"    Last: {stats['last_occurrence']['message']}")


# Global error aggregator instance
error_aggregator = ErrorAggregator()


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with structured context and aggregation.

    Args:
        error_type: Category of the error (e.g., 'join', 'handshake', 'transport')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    parts = [f"[{error_type.upper()}] {message}"]
    if exception is not None:
        parts.append(f"Exception: {type(exception).__name__}: {exception}")
    if context:
        parts.append("Context: " + " | ".join(f"{k}={v}" for k, v in context.items()))
    logging.log(level, " | ".join(parts))

    error_aggregator.record_error(error_type, message, context)
    rate = error_aggregator.rate_per_hour(error_type)
    if rate > ERROR_ALERT_RATE_PER_HOUR:
        logging.critical(f"🚨 HIGH ERROR RATE ALERT: {error_type} occurring at {rate:.1f}/hour")


class LoggerConfigurator:
    """Handles logging configuration using colorlog.

    Uses the DEBUG environment variable ('true', '1' or 'yes') to select the
    DEBUG level, INFO otherwise.
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or {}

    def configure(self) -> None:
        """Configure the root logger with colored console output."""
        log_level = logging.DEBUG if is_debug_enabled() else logging.INFO
        if "level" in self.config:
            log_level = self.config["level"]

        formatter = colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        logging.basicConfig(level=log_level, handlers=[handler], format="%(message)s")

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        # Raw frame dumps from websockets are noise next to our own frame logs
        logging.getLogger("websockets").setLevel(logging.INFO)

        for h in root_logger.handlers:
            h.setFormatter(formatter)

        if self.config.get("summary_on_exit", True):
            atexit.register(self._log_final_error_summary)

    def _log_final_error_summary(self) -> None:
        """Log final error summary on application exit."""
        try:
            logging.info("📊 Final error summary before shutdown:")
            error_aggregator.log_summary_report()
        except Exception as e:  # noqa: BLE001
            logging.error(f"Failed to log final error summary: {e}")
