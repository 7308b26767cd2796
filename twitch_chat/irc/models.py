"""Shared IRC data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from types import MappingProxyType


class ConnectionState(Enum):
    """Connection state reported by the transport."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class CloseMode(Enum):
    """How the transport should close the connection."""

    IRC = "irc"  # QUIT first, then the WebSocket close handshake
    WEBSOCKET = "websocket"


class IRCCommand(StrEnum):
    PASS = "PASS"
    NICK = "NICK"
    CAP = "CAP"
    JOIN = "JOIN"
    PART = "PART"
    PING = "PING"
    PONG = "PONG"
    QUIT = "QUIT"
    PRIVMSG = "PRIVMSG"
    NOTICE = "NOTICE"
    RPL_WELCOME = "001"
    RPL_NAMREPLY = "353"
    RPL_ENDOFNAMES = "366"


class TwitchCommand(StrEnum):
    """Twitch-specific IRC commands."""

    CLEARCHAT = "CLEARCHAT"  # Chat or a single user's messages were cleared
    CLEARMSG = "CLEARMSG"  # A single message was removed
    GLOBALUSERSTATE = "GLOBALUSERSTATE"  # Sent after successful authentication
    HOSTTARGET = "HOSTTARGET"
    RECONNECT = "RECONNECT"  # Server is about to terminate the connection
    ROOMSTATE = "ROOMSTATE"  # Chat room settings on join or change
    USERNOTICE = "USERNOTICE"  # Subs, raids, gifts and similar events
    USERSTATE = "USERSTATE"  # Sent on join or after our own PRIVMSG
    WHISPER = "WHISPER"


# Numeric replies and their symbolic names
NUMERIC_REPLIES: dict[str, str] = {
    "001": "RPL_WELCOME",
    "002": "RPL_YOURHOST",
    "003": "RPL_CREATED",
    "004": "RPL_MYINFO",
    "353": "RPL_NAMREPLY",
    "366": "RPL_ENDOFNAMES",
    "372": "RPL_MOTD",
    "375": "RPL_MOTDSTART",
    "376": "RPL_ENDOFMOTD",
    "421": "ERR_UNKNOWNCOMMAND",
}
NAMED_REPLIES: dict[str, str] = {name: code for code, name in NUMERIC_REPLIES.items()}

WELCOME_COMMANDS = frozenset({"001", "RPL_WELCOME"})


@dataclass(frozen=True, slots=True)
class RawMessage:
    """One tokenized protocol line; never mutated after construction."""

    raw: str
    command: str
    parameters: tuple[str, ...] = ()
    tags: Mapping[str, str] = field(default_factory=dict)
    prefix: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
