"""
Tests for the reconnect helper
"""

from unittest.mock import AsyncMock, Mock

import pytest

from twitch_chat.errors import ConfigurationError, TransportError
from twitch_chat.utils import RetryExhaustedError, connect_with_retry


def _client(side_effect):
    client = Mock()
    client.connect = AsyncMock(side_effect=side_effect)
    return client


class TestConnectWithRetry:
    @pytest.mark.asyncio
    async def test_succeeds_first_time(self):
        client = _client(None)
        await connect_with_retry(client, max_attempts=3, max_backoff=0)
        client.connect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_retries_transport_errors(self):
        client = _client([TransportError("refused", "open"), TransportError("refused", "open"), None])
        await connect_with_retry(client, max_attempts=5, max_backoff=0)
        assert client.connect.await_count == 3

    @pytest.mark.asyncio
    async def test_exhausted(self):
        error = TransportError("refused", "open")
        client = _client(error)
        with pytest.raises(RetryExhaustedError) as exc_info:
            await connect_with_retry(client, max_attempts=2, max_backoff=0)
        assert client.connect.await_count == 2
        assert exc_info.value.attempts == 2
        assert exc_info.value.final_exception is error

    @pytest.mark.asyncio
    async def test_configuration_error_not_retried(self):
        client = _client(ConfigurationError("blank nickname"))
        with pytest.raises(ConfigurationError):
            await connect_with_retry(client, max_attempts=5, max_backoff=0)
        client.connect.assert_awaited_once()
