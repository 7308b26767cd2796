"""Project logging package.

Contains the colorlog based configurator and the structured error channel.
"""

from .logging_config import (  # noqa: F401
    ErrorAggregator,
    LoggerConfigurator,
    error_aggregator,
    is_debug_enabled,
    log_structured_error,
)

__all__ = [
    "ErrorAggregator",
    "LoggerConfigurator",
    "error_aggregator",
    "is_debug_enabled",
    "log_structured_error",
]
