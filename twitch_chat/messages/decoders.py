"""Decode rules for raw tag values.

Every decoder takes the raw (already unescaped) tag value and either returns
the typed value or raises ``TagDecodeError``. List decoders decode each
element on its own and drop the elements that fail, so one bad element never
hides the others.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TypeVar

from ..errors import TagDecodeError
from .models import Badge, BadgeInfo, Color, Emote, EmotePosition

_HEX_COLOR = re.compile(r"^#([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})$")
_INTEGER = re.compile(r"[+-]?[0-9]+")

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


def decode_text(value: str) -> str:
    return value


def decode_int(value: str) -> int:
    """Plain ASCII decimal only; no underscores, padding or other scripts' digits."""
    if not _INTEGER.fullmatch(value):
        raise TagDecodeError(f"not an integer: {value!r}", value=value)
    return int(value)


def decode_flag(value: str) -> bool:
    """Twitch flags are ``1`` when set; any other present value means unset."""
    return value == "1"


def decode_uuid(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError as e:
        raise TagDecodeError(f"not a UUID: {value!r}", value=value) from e


def decode_timestamp_ms(value: str) -> datetime:
    millis = decode_int(value)
    try:
        return datetime.fromtimestamp(millis / 1000, tz=UTC)
    except (ValueError, OverflowError, OSError) as e:
        raise TagDecodeError(f"not a millisecond timestamp: {value!r}", value=value) from e


def decode_duration_seconds(value: str) -> timedelta:
    try:
        return timedelta(seconds=float(value))
    except (ValueError, OverflowError) as e:
        raise TagDecodeError(f"not a duration in seconds: {value!r}", value=value) from e


def decode_color(value: str) -> Color:
    match = _HEX_COLOR.match(value)
    if not match:
        raise TagDecodeError(f"not a #RRGGBB color: {value!r}", value=value)
    return Color(*(int(part, 16) for part in match.groups()))


def decode_enum(enum_cls: type[E]) -> Callable[[str], E]:
    """Build a decoder matching member names case-insensitively, then values."""

    def _decode(value: str) -> E:
        member = enum_cls.__members__.get(value.upper())
        if member is not None:
            return member
        lowered = value.lower()
        for candidate in enum_cls:
            if str(candidate.value).lower() == lowered:
                return candidate
        raise TagDecodeError(f"unknown {enum_cls.__name__}: {value!r}", value=value)

    _decode.__name__ = f"decode_{enum_cls.__name__.lower()}"
    return _decode


def _split_pair(element: str, sep: str) -> tuple[str, int]:
    name, found, number = element.partition(sep)
    if not found or not name:
        raise TagDecodeError(f"expected name{sep}number: {element!r}", value=element)
    return name, decode_int(number)


def decode_badge_info(value: str) -> BadgeInfo:
    return BadgeInfo(*_split_pair(value, "/"))


def decode_badge(element: str) -> Badge:
    return Badge(*_split_pair(element, "/"))


def decode_emote(element: str) -> Emote:
    emote_id, found, ranges = element.partition(":")
    if not found or not emote_id:
        raise TagDecodeError(f"expected id:ranges: {element!r}", value=element)
    positions = []
    for pair in ranges.split(","):
        start, sep, end = pair.partition("-")
        if not sep:
            raise TagDecodeError(f"expected start-end: {pair!r}", value=element)
        positions.append(EmotePosition(decode_int(start), decode_int(end)))
    return Emote(emote_id, tuple(positions))


def decode_list(
    element_decoder: Callable[[str], T], sep: str = ","
) -> Callable[[str], tuple[T, ...]]:
    """Build a decoder for a ``sep`` separated list of independently decoded elements."""

    def _decode(value: str) -> tuple[T, ...]:
        items: list[T] = []
        for element in value.split(sep):
            if not element:
                continue
            try:
                items.append(element_decoder(element))
            except TagDecodeError as e:
                logging.debug(f"🏷️ Dropping undecodable list element {element!r}: {e}")
        return tuple(items)

    _decode.__name__ = f"decode_list_of_{getattr(element_decoder, '__name__', 'items')}"
    return _decode


decode_badges = decode_list(decode_badge, ",")
decode_emotes = decode_list(decode_emote, "/")
decode_int_list = decode_list(decode_int, ",")
