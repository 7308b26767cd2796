"""IRCv3 line tokenizer and builder."""

from __future__ import annotations

from collections.abc import Mapping

from .models import NAMED_REPLIES, NUMERIC_REPLIES, RawMessage

_TAG_UNESCAPES = {":": ";", "s": " ", "\\": "\\", "r": "\r", "n": "\n"}
_TAG_ESCAPES = {";": "\\:", " ": "\\s", "\\": "\\\\", "\r": "\\r", "\n": "\\n"}


def unescape_tag_value(value: str) -> str:
    out: list[str] = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:  # lone trailing backslash is dropped
            break
        out.append(_TAG_UNESCAPES.get(nxt, nxt))
    return "".join(out)


def escape_tag_value(value: str) -> str:
    return "".join(_TAG_ESCAPES.get(ch, ch) for ch in value)


def parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = unescape_tag_value(v)
    return tags


class IRCParser:
    """Splits raw lines into ``RawMessage`` and renders them back.

    ``parse_message`` never raises for non-blank input: malformed lines
    produce a message with an empty command.
    """

    def parse_message(self, raw_line: str) -> RawMessage:
        original = raw_line
        line = raw_line.rstrip("\r\n")
        tags: dict[str, str] = {}
        prefix: str | None = None

        if line.startswith("@"):
            tags_part, _, line = line.partition(" ")
            tags = parse_tags(tags_part[1:])
            line = line.lstrip(" ")

        if line.startswith(":"):
            # Malformed lines may omit the space after the prefix
            prefix, _, line = line[1:].partition(" ")
            line = line.lstrip(" ")

        trailing: str | None = None
        if line.startswith(":"):
            line, trailing = "", line[1:]
        elif " :" in line:
            line, trailing = line.split(" :", 1)

        parts = line.split()
        command = parts[0] if parts else ""
        parameters = parts[1:]
        if trailing is not None:
            parameters.append(trailing)

        return RawMessage(
            raw=original,
            command=command,
            parameters=tuple(parameters),
            tags=tags,
            prefix=prefix,
        )

    def build_message(self, message: RawMessage, use_numeric: bool = False) -> str:
        """Render a message as a wire line (without the line terminator).

        Args:
            message: Message to render.
            use_numeric: Emit numeric replies as their three-digit code
                instead of the symbolic name.
        """
        parts: list[str] = []
        if message.tags:
            parts.append("@" + _render_tags(message.tags))
        if message.prefix:
            parts.append(f":{message.prefix}")

        command = message.command
        if use_numeric:
            command = NAMED_REPLIES.get(command, command)
        else:
            command = NUMERIC_REPLIES.get(command, command)
        parts.append(command)

        params = list(message.parameters)
        if params:
            last = params.pop()
            parts.extend(params)
            if not last or " " in last or last.startswith(":"):
                last = f":{last}"
            parts.append(last)
        return " ".join(parts)


def _render_tags(tags: Mapping[str, str]) -> str:
    return ";".join(f"{k}={escape_tag_value(v)}" for k, v in tags.items())
