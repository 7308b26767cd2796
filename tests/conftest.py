"""Shared fixtures for the unit tests."""

import pytest

from twitch_chat.config import SessionConfig
from twitch_chat.logs import error_aggregator

from tests.fakes import FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session_config() -> SessionConfig:
    return SessionConfig(
        oauth_token="oauth:token",
        nickname="TestUser",
        capabilities=["twitch.tv/commands", "twitch.tv/membership", "twitch.tv/tags"],
    )


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    error_aggregator.reset()
    yield
    error_aggregator.reset()
