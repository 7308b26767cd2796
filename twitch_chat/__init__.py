"""Twitch chat session layer.

Connects to Twitch chat over WebSocket, performs the login handshake, keeps
channel membership through a throttled join queue and exposes every inbound
line as a ``TwitchMessage`` with typed tag accessors.
"""

from .client import TwitchChatClient, create_client  # noqa: F401
from .config import ConfigProvider, SessionConfig  # noqa: F401
from .events import ClientEvent, TransportEvent  # noqa: F401
from .messages import TwitchMessage, TwitchParser  # noqa: F401

__version__ = "1.0.0"

__all__ = [
    "ClientEvent",
    "ConfigProvider",
    "SessionConfig",
    "TransportEvent",
    "TwitchChatClient",
    "TwitchMessage",
    "TwitchParser",
    "create_client",
]
