"""Default wiring of a chat client."""

from __future__ import annotations

from ..config.model import SessionConfig
from ..config.provider import ConfigProvider
from ..messages.parser import TwitchParser
from ..transport.websocket import WebSocketTransport
from .client import TwitchChatClient


def create_client(
    config: SessionConfig | ConfigProvider | None = None, *, url: str | None = None
) -> TwitchChatClient:
    """Build a client over a WebSocket transport.

    Args:
        config: Session settings or a provider for hot-reloaded settings.
        url: Endpoint override; defaults to the config's url.
    """
    provider = config if isinstance(config, ConfigProvider) else ConfigProvider(config)
    transport = WebSocketTransport(url or provider.current.url)
    return TwitchChatClient(transport, provider, TwitchParser())
