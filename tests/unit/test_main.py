"""
Tests for the command line entry point
"""

import asyncio
import json
import logging

import pytest

from twitch_chat.errors import ConfigurationError
from twitch_chat.irc.models import RawMessage
from twitch_chat.main import log_chat_message, log_sent_message, parse_args, run, wait_for_either
from twitch_chat.messages import TwitchMessage, TwitchParser


class TestParseArgs:
    def test_channels_and_options(self):
        args = parse_args(["foo", "bar", "--nick", "bot", "--config", "c.conf"])
        assert args.channels == ["foo", "bar"]
        assert args.nick == "bot"
        assert args.config == "c.conf"
        assert args.health_check is False

    def test_defaults(self):
        args = parse_args([])
        assert args.channels == []
        assert args.url is None


class TestMessageLogging:
    def setup_method(self):
        self.parser = TwitchParser()

    def test_sent_pass_is_masked(self, caplog):
        with caplog.at_level(logging.DEBUG):
            log_sent_message(self.parser.parse_message("PASS oauth:secret"))
        assert "secret" not in caplog.text
        assert "PASS ***" in caplog.text

    def test_chat_line(self, caplog):
        message = self.parser.parse_message(
            "@display-name=Foo :foo!foo@foo PRIVMSG #bar :hello world"
        )
        with caplog.at_level(logging.INFO):
            log_chat_message(message)
        assert "#bar Foo: hello world" in caplog.text

    def test_chat_line_without_display_name(self, caplog):
        message = TwitchMessage(
            RawMessage(raw="", command="PRIVMSG", parameters=("#bar", "hi"), prefix="foo!foo@foo")
        )
        with caplog.at_level(logging.INFO):
            log_chat_message(message)
        assert "#bar foo: hi" in caplog.text


class TestRun:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in ("TWITCH_OAUTH_TOKEN", "TWITCH_NICKNAME", "TWITCH_CHAT_URL", "TWITCH_CAPABILITIES"):
            monkeypatch.delenv(name, raising=False)

    @pytest.mark.asyncio
    async def test_health_check(self, tmp_path):
        path = tmp_path / "twitch_chat.conf"
        path.write_text(json.dumps({"nickname": "bot", "channels": ["foo"]}))
        args = parse_args(["--health-check", "--config", str(path)])
        assert await run(args) == 0

    @pytest.mark.asyncio
    async def test_blank_nick_fails_before_connecting(self, tmp_path):
        args = parse_args(["--health-check", "--config", str(tmp_path / "x.conf"), "--nick", " "])
        with pytest.raises(ConfigurationError):
            await run(args)


class TestWaitForEither:
    @pytest.mark.asyncio
    async def test_returns_event_that_fired(self):
        first, second = asyncio.Event(), asyncio.Event()
        asyncio.get_running_loop().call_later(0.01, second.set)
        assert await wait_for_either(first, second) is second

    @pytest.mark.asyncio
    async def test_first_wins_ties(self):
        first, second = asyncio.Event(), asyncio.Event()
        first.set()
        second.set()
        assert await wait_for_either(first, second) is first
