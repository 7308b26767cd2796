"""Application helpers."""

from .retry import RetryExhaustedError, connect_with_retry  # noqa: F401

__all__ = ["RetryExhaustedError", "connect_with_retry"]
