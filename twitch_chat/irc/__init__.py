"""IRC protocol primitives: raw messages, command names and the line tokenizer."""

from .models import (  # noqa: F401
    NAMED_REPLIES,
    NUMERIC_REPLIES,
    WELCOME_COMMANDS,
    CloseMode,
    ConnectionState,
    IRCCommand,
    RawMessage,
    TwitchCommand,
)
from .parser import IRCParser, escape_tag_value, parse_tags, unescape_tag_value  # noqa: F401

__all__ = [
    "CloseMode",
    "ConnectionState",
    "IRCCommand",
    "IRCParser",
    "NAMED_REPLIES",
    "NUMERIC_REPLIES",
    "RawMessage",
    "TwitchCommand",
    "WELCOME_COMMANDS",
    "escape_tag_value",
    "parse_tags",
    "unescape_tag_value",
]
