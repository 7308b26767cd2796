"""Typed, lazily decoded view over a tokenized Twitch message.

Each typed attribute of ``TwitchMessage`` is a ``TagField``: a (tag key,
decoder) pair evaluated on every access through ``TwitchMessage.decode_tag``.
That routine is the only place the decode policy lives:

* key missing -> ``None``
* decoder raises ``TagDecodeError`` -> ``None`` (logged at DEBUG)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import Any, Generic, TypeVar, overload

from ..errors import TagDecodeError
from ..irc.models import IRCCommand, RawMessage, TwitchCommand
from . import decoders as d
from .models import Badge, BadgeInfo, Color, Emote, MessageId, SubPlan, UserType

T = TypeVar("T")

_TEXT_COMMANDS = frozenset(
    command.value
    for command in (
        IRCCommand.PRIVMSG,
        IRCCommand.NOTICE,
        TwitchCommand.USERNOTICE,
        TwitchCommand.WHISPER,
        TwitchCommand.CLEARMSG,
    )
)


class TagField(Generic[T]):
    """Descriptor binding one tag key to its decode rule."""

    def __init__(self, key: str, decoder: Callable[[str], T]) -> None:
        self.key = key
        self.decoder = decoder
        self.name = key

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> TagField[T]: ...
    @overload
    def __get__(self, instance: TwitchMessage, owner: type) -> T | None: ...

    def __get__(self, instance: TwitchMessage | None, owner: type) -> Any:
        if instance is None:
            return self
        return instance.decode_tag(self.key, self.decoder)

    def __repr__(self) -> str:
        return f"TagField({self.key!r}, {getattr(self.decoder, '__name__', self.decoder)!r})"


class TwitchMessage:
    """A received or sent chat line with typed access to its tags."""

    # Moderation
    ban_duration: TagField[timedelta] = TagField("ban-duration", d.decode_duration_seconds)
    room_id: TagField[int] = TagField("room-id", d.decode_int)
    target_user_id: TagField[int] = TagField("target-user-id", d.decode_int)
    tmi_sent_ts: TagField[datetime] = TagField("tmi-sent-ts", d.decode_timestamp_ms)
    login: TagField[str] = TagField("login", d.decode_text)
    target_msg_id: TagField[uuid.UUID] = TagField("target-msg-id", d.decode_uuid)

    # Sender
    badge_info: TagField[BadgeInfo] = TagField("badge-info", d.decode_badge_info)
    badges: TagField[tuple[Badge, ...]] = TagField("badges", d.decode_badges)
    color: TagField[Color] = TagField("color", d.decode_color)
    display_name: TagField[str] = TagField("display-name", d.decode_text)
    emote_sets: TagField[tuple[int, ...]] = TagField("emote-sets", d.decode_int_list)
    emotes: TagField[tuple[Emote, ...]] = TagField("emotes", d.decode_emotes)
    turbo: TagField[bool] = TagField("turbo", d.decode_flag)
    user_id: TagField[int] = TagField("user-id", d.decode_int)
    user_type: TagField[UserType] = TagField("user-type", d.decode_enum(UserType))
    msg_id: TagField[MessageId] = TagField("msg-id", d.decode_enum(MessageId))
    bits: TagField[int] = TagField("bits", d.decode_int)
    id: TagField[uuid.UUID] = TagField("id", d.decode_uuid)
    mod: TagField[bool] = TagField("mod", d.decode_flag)
    subscriber: TagField[bool] = TagField("subscriber", d.decode_flag)
    vip: TagField[bool] = TagField("vip", d.decode_flag)
    first_msg: TagField[bool] = TagField("first-msg", d.decode_flag)
    returning_chatter: TagField[bool] = TagField("returning-chatter", d.decode_flag)

    # Replies
    reply_parent_msg_id: TagField[uuid.UUID] = TagField("reply-parent-msg-id", d.decode_uuid)
    reply_parent_user_id: TagField[int] = TagField("reply-parent-user-id", d.decode_int)
    reply_parent_user_login: TagField[str] = TagField("reply-parent-user-login", d.decode_text)
    reply_parent_display_name: TagField[str] = TagField(
        "reply-parent-display-name", d.decode_text
    )
    reply_parent_msg_body: TagField[str] = TagField("reply-parent-msg-body", d.decode_text)
    reply_thread_parent_msg_id: TagField[uuid.UUID] = TagField(
        "reply-thread-parent-msg-id", d.decode_uuid
    )
    reply_thread_parent_user_login: TagField[str] = TagField(
        "reply-thread-parent-user-login", d.decode_text
    )

    # Shared chat
    source_badges: TagField[tuple[Badge, ...]] = TagField("source-badges", d.decode_badges)
    source_badge_info: TagField[BadgeInfo] = TagField(
        "source-badge-info", d.decode_badge_info
    )
    source_id: TagField[uuid.UUID] = TagField("source-id", d.decode_uuid)
    source_room_id: TagField[int] = TagField("source-room-id", d.decode_int)
    source_msg_id: TagField[uuid.UUID] = TagField("source-msg-id", d.decode_uuid)

    # Room state
    emote_only: TagField[bool] = TagField("emote-only", d.decode_flag)
    followers_only: TagField[int] = TagField("followers-only", d.decode_int)
    r9k: TagField[bool] = TagField("r9k", d.decode_flag)
    slow: TagField[int] = TagField("slow", d.decode_int)
    subs_only: TagField[bool] = TagField("subs-only", d.decode_flag)

    # USERNOTICE parameters
    system_msg: TagField[str] = TagField("system-msg", d.decode_text)
    msg_param_cumulative_months: TagField[int] = TagField(
        "msg-param-cumulative-months", d.decode_int
    )
    msg_param_display_name: TagField[str] = TagField("msg-param-displayName", d.decode_text)
    msg_param_login: TagField[str] = TagField("msg-param-login", d.decode_text)
    msg_param_months: TagField[int] = TagField("msg-param-months", d.decode_int)
    msg_param_promo_gift_total: TagField[int] = TagField(
        "msg-param-promo-gift-total", d.decode_int
    )
    msg_param_promo_name: TagField[str] = TagField("msg-param-promo-name", d.decode_text)
    msg_param_recipient_display_name: TagField[str] = TagField(
        "msg-param-recipient-display-name", d.decode_text
    )
    msg_param_recipient_id: TagField[int] = TagField("msg-param-recipient-id", d.decode_int)
    msg_param_recipient_user_name: TagField[str] = TagField(
        "msg-param-recipient-user-name", d.decode_text
    )
    msg_param_sender_login: TagField[str] = TagField("msg-param-sender-login", d.decode_text)
    msg_param_sender_name: TagField[str] = TagField("msg-param-sender-name", d.decode_text)
    msg_param_should_share_streak: TagField[bool] = TagField(
        "msg-param-should-share-streak", d.decode_flag
    )
    msg_param_streak_months: TagField[int] = TagField("msg-param-streak-months", d.decode_int)
    msg_param_sub_plan: TagField[SubPlan] = TagField(
        "msg-param-sub-plan", d.decode_enum(SubPlan)
    )
    msg_param_sub_plan_name: TagField[str] = TagField("msg-param-sub-plan-name", d.decode_text)
    msg_param_viewer_count: TagField[int] = TagField("msg-param-viewerCount", d.decode_int)
    msg_param_threshold: TagField[int] = TagField("msg-param-threshold", d.decode_int)
    msg_param_gift_months: TagField[int] = TagField("msg-param-gift-months", d.decode_int)

    __slots__ = ("_raw",)

    def __init__(self, raw: RawMessage) -> None:
        self._raw = raw

    @classmethod
    def tag_fields(cls) -> dict[str, TagField[Any]]:
        """Attribute name -> field, for every typed tag accessor."""
        fields: dict[str, TagField[Any]] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, TagField):
                    fields[name] = value
        return fields

    def decode_tag(self, key: str, decoder: Callable[[str], T]) -> T | None:
        value = self._raw.tags.get(key)
        if value is None:
            return None
        try:
            return decoder(value)
        except TagDecodeError as e:
            logging.debug(f"🏷️ Ignoring malformed tag {key}={value!r}: {e}")
            return None

    def decoded_tags(self) -> dict[str, Any]:
        """Every typed field whose tag is present, decoded."""
        return {
            name: field.__get__(self, type(self))
            for name, field in self.tag_fields().items()
            if field.key in self._raw.tags
        }

    @property
    def raw_message(self) -> RawMessage:
        return self._raw

    @property
    def raw(self) -> str:
        return self._raw.raw

    @property
    def command(self) -> str:
        return self._raw.command

    @property
    def parameters(self) -> tuple[str, ...]:
        return self._raw.parameters

    @property
    def tags(self) -> Mapping[str, str]:
        return self._raw.tags

    @property
    def prefix(self) -> str | None:
        return self._raw.prefix

    @property
    def nick(self) -> str | None:
        if not self._raw.prefix:
            return None
        return self._raw.prefix.split("!", 1)[0]

    @property
    def channel(self) -> str | None:
        for param in self._raw.parameters:
            if param.startswith("#"):
                return param
        return None

    @property
    def text(self) -> str | None:
        if self._raw.command not in _TEXT_COMMANDS or len(self._raw.parameters) < 2:
            return None
        return self._raw.parameters[-1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TwitchMessage):
            return NotImplemented
        return self._raw == other._raw

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TwitchMessage(command={self.command!r}, parameters={self.parameters!r})"
