"""Tagged message model: typed, lazily decoded Twitch tags."""

from .message import TagField, TwitchMessage  # noqa: F401
from .models import (  # noqa: F401
    Badge,
    BadgeInfo,
    Color,
    Emote,
    EmotePosition,
    MessageId,
    SubPlan,
    UserType,
)
from .parser import TwitchParser  # noqa: F401

__all__ = [
    "Badge",
    "BadgeInfo",
    "Color",
    "Emote",
    "EmotePosition",
    "MessageId",
    "SubPlan",
    "TagField",
    "TwitchMessage",
    "TwitchParser",
    "UserType",
]
