"""Chat transports."""

from .protocols import ChatTransport  # noqa: F401
from .websocket import WebSocketTransport  # noqa: F401

__all__ = ["ChatTransport", "WebSocketTransport"]
