"""
Configuration constants for the Twitch chat session layer

This module contains the wire-level constants and tunables used throughout the
package. Each tunable can be overridden by setting an environment variable
with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Attempts to parse the environment variable as a float. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Twitch chat endpoints
TWITCH_IRC_WS_URL = "ws://irc-ws.chat.twitch.tv:80"  # WebSocket, no TLS
TWITCH_IRC_WSS_URL = "wss://irc-ws.chat.twitch.tv:443"  # WebSocket over TLS

# Session defaults
OAUTH_PREFIX = "oauth:"
DEFAULT_NICKNAME = "justinfan123"  # Anonymous read-only login
DEFAULT_CAPABILITIES = (
    "twitch.tv/commands",
    "twitch.tv/membership",
    "twitch.tv/tags",
)

# Join scheduler
JOIN_QUEUE_POLL_INTERVAL = _get_env_float(
    "JOIN_QUEUE_POLL_INTERVAL", 0.2
)  # Seconds between queue checks when there is no backlog

# Transport
WEBSOCKET_OPEN_TIMEOUT_SECONDS = _get_env_float(
    "WEBSOCKET_OPEN_TIMEOUT_SECONDS", 10.0
)  # Opening handshake timeout
WEBSOCKET_CLOSE_TIMEOUT_SECONDS = _get_env_float(
    "WEBSOCKET_CLOSE_TIMEOUT_SECONDS", 5.0
)  # Closing handshake timeout
WEBSOCKET_NORMAL_CLOSE_CODE = 1000

# Error aggregation
ERROR_ALERT_RATE_PER_HOUR = _get_env_float(
    "ERROR_ALERT_RATE_PER_HOUR", 10.0
)  # Errors per hour in one category before a critical alert is logged
ERROR_HISTORY_LIMIT = _get_env_int(
    "ERROR_HISTORY_LIMIT", 1000
)  # Recent errors retained per category

# Application-level reconnect (the client itself never retries)
RECONNECT_MAX_ATTEMPTS = _get_env_int(
    "RECONNECT_MAX_ATTEMPTS", 10
)  # Maximum connect attempts per reconnect cycle
RECONNECT_MAX_BACKOFF_SECONDS = _get_env_float(
    "RECONNECT_MAX_BACKOFF_SECONDS", 60.0
)  # Upper bound for exponential backoff between attempts
