"""Tokenizer producing ``TwitchMessage`` instead of bare ``RawMessage``."""

from __future__ import annotations

from ..irc.parser import IRCParser
from .message import TwitchMessage


class TwitchParser:
    def __init__(self, irc_parser: IRCParser | None = None) -> None:
        self.irc_parser = irc_parser or IRCParser()

    def parse_message(self, raw_line: str) -> TwitchMessage:
        return TwitchMessage(self.irc_parser.parse_message(raw_line))

    def build_message(self, message: TwitchMessage, use_numeric: bool = False) -> str:
        return self.irc_parser.build_message(message.raw_message, use_numeric)
