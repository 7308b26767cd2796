"""Value types decoded from Twitch message tags."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Badge(NamedTuple):
    name: str
    version: int


class BadgeInfo(NamedTuple):
    """Badge metadata; for ``subscriber`` the number is the exact months subscribed."""

    name: str
    months: int


class EmotePosition(NamedTuple):
    """Character range of one emote occurrence, as sent by the server."""

    start: int
    end: int


class Emote(NamedTuple):
    id: str
    positions: tuple[EmotePosition, ...]


class Color(NamedTuple):
    red: int
    green: int
    blue: int

    @property
    def hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"


class UserType(Enum):
    NORMAL = ""
    ADMIN = "admin"
    GLOBAL_MOD = "global_mod"
    STAFF = "staff"


class SubPlan(Enum):
    PRIME = "Prime"
    FIRST = "1000"
    SECOND = "2000"
    THIRD = "3000"


class MessageId(Enum):
    """Values of the ``msg-id`` tag on NOTICE and USERNOTICE messages."""

    # NOTICE
    EMOTE_ONLY_OFF = "emote_only_off"
    EMOTE_ONLY_ON = "emote_only_on"
    FOLLOWERS_OFF = "followers_off"
    FOLLOWERS_ON = "followers_on"
    FOLLOWERS_ON_ZERO = "followers_on_zero"
    MSG_BANNED = "msg_banned"
    MSG_BAD_CHARACTERS = "msg_bad_characters"
    MSG_CHANNEL_BLOCKED = "msg_channel_blocked"
    MSG_CHANNEL_SUSPENDED = "msg_channel_suspended"
    MSG_DUPLICATE = "msg_duplicate"
    MSG_EMOTEONLY = "msg_emoteonly"
    MSG_FOLLOWERSONLY = "msg_followersonly"
    MSG_FOLLOWERSONLY_FOLLOWED = "msg_followersonly_followed"
    MSG_FOLLOWERSONLY_ZERO = "msg_followersonly_zero"
    MSG_R9K = "msg_r9k"
    MSG_RATELIMIT = "msg_ratelimit"
    MSG_REJECTED = "msg_rejected"
    MSG_REJECTED_MANDATORY = "msg_rejected_mandatory"
    MSG_REQUIRES_VERIFIED_PHONE_NUMBER = "msg_requires_verified_phone_number"
    MSG_SLOWMODE = "msg_slowmode"
    MSG_SUBSONLY = "msg_subsonly"
    MSG_SUSPENDED = "msg_suspended"
    MSG_TIMEDOUT = "msg_timedout"
    MSG_VERIFIED_EMAIL = "msg_verified_email"
    SLOW_OFF = "slow_off"
    SLOW_ON = "slow_on"
    SUBS_OFF = "subs_off"
    SUBS_ON = "subs_on"
    TOS_BAN = "tos_ban"
    UNRECOGNIZED_CMD = "unrecognized_cmd"
    # USERNOTICE
    SUB = "sub"
    RESUB = "resub"
    SUBGIFT = "subgift"
    SUBMYSTERYGIFT = "submysterygift"
    GIFTPAIDUPGRADE = "giftpaidupgrade"
    REWARDGIFT = "rewardgift"
    ANONGIFTPAIDUPGRADE = "anongiftpaidupgrade"
    RAID = "raid"
    UNRAID = "unraid"
    BITSBADGETIER = "bitsbadgetier"
    SHAREDCHATNOTICE = "sharedchatnotice"
