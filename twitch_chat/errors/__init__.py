"""Error hierarchy for the chat session layer."""

from .internal import (  # noqa: F401
    AlreadyConnectedError,
    AlreadyDisconnectedError,
    ChatClientError,
    ConfigurationError,
    StateError,
    TagDecodeError,
    TransportError,
)

__all__ = [
    "AlreadyConnectedError",
    "AlreadyDisconnectedError",
    "ChatClientError",
    "ConfigurationError",
    "StateError",
    "TagDecodeError",
    "TransportError",
]
