"""Session controller, join scheduler and default wiring."""

from .client import TwitchChatClient  # noqa: F401
from .factory import create_client  # noqa: F401
from .join_scheduler import JoinScheduler, channel_key, normalize_channel  # noqa: F401

__all__ = [
    "JoinScheduler",
    "TwitchChatClient",
    "channel_key",
    "create_client",
    "normalize_channel",
]
