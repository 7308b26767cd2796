"""
Tests for the websockets-based transport
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from websockets.exceptions import ConnectionClosedOK, InvalidURI

from twitch_chat.errors import TransportError
from twitch_chat.events import TransportEvent
from twitch_chat.irc.models import CloseMode, ConnectionState
from twitch_chat.transport import ChatTransport, WebSocketTransport
from twitch_chat.transport.websocket import WEBSOCKET_NOT_CONNECTED_ERROR

from tests.fakes import wait_until

CONNECT = "twitch_chat.transport.websocket.websockets.connect"


class FakeWebSocket:
    """Async-iterable connection fed from a queue; ``close`` ends iteration."""

    def __init__(self):
        self.frames: asyncio.Queue = asyncio.Queue()
        self.send = AsyncMock()
        self.close = AsyncMock(side_effect=self._close)

    async def _close(self, code=1000):
        await self.frames.put(None)

    def __aiter__(self):
        return self

    async def __anext__(self):
        frame = await self.frames.get()
        if frame is None:
            raise StopAsyncIteration
        if isinstance(frame, Exception):
            raise frame
        return frame


class TestWebSocketTransport:
    """Test WebSocketTransport lifecycle and I/O"""

    def setup_method(self):
        self.transport = WebSocketTransport("wss://irc.test:443", open_timeout=1, close_timeout=1)
        self.seen: list[tuple] = []
        for event in TransportEvent:
            self.transport.events.on(event, lambda *a, _e=event: self.seen.append((_e, *a)))

    def _events(self, event):
        return [item[1:] for item in self.seen if item[0] is event]

    def test_satisfies_protocol(self):
        assert isinstance(self.transport, ChatTransport)
        assert self.transport.state is ConnectionState.DISCONNECTED
        assert self.transport.is_connected is False

    @pytest.mark.asyncio
    async def test_open_emits_connected_and_frames(self):
        ws = FakeWebSocket()
        with patch(CONNECT, new=AsyncMock(return_value=ws)) as connect:
            await self.transport.open()
        connect.assert_awaited_once_with("wss://irc.test:443", open_timeout=1, close_timeout=1)
        assert self.transport.is_connected is True

        await ws.frames.put("PING :tmi.twitch.tv\r\n")
        await wait_until(lambda: self._events(TransportEvent.MESSAGE_RECEIVED))
        assert self._events(TransportEvent.CONNECTED) == [("wss://irc.test:443",)]
        assert self._events(TransportEvent.MESSAGE_RECEIVED) == [("PING :tmi.twitch.tv\r\n",)]
        assert self._events(TransportEvent.STATE_CHANGED) == [
            (ConnectionState.CONNECTING, ConnectionState.DISCONNECTED),
            (ConnectionState.CONNECTED, ConnectionState.CONNECTING),
        ]
        await self.transport.close(CloseMode.WEBSOCKET)

    @pytest.mark.asyncio
    async def test_open_failure_wrapped(self):
        with patch(CONNECT, new=AsyncMock(side_effect=OSError("refused"))):
            with pytest.raises(TransportError) as exc_info:
                await self.transport.open()
        assert exc_info.value.operation_type == "open"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert self.transport.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_open_invalid_uri_wrapped(self):
        error = InvalidURI("nope", "not a websocket uri")
        with patch(CONNECT, new=AsyncMock(side_effect=error)):
            with pytest.raises(TransportError):
                await self.transport.open()

    @pytest.mark.asyncio
    async def test_open_twice_rejected(self):
        ws = FakeWebSocket()
        with patch(CONNECT, new=AsyncMock(return_value=ws)):
            await self.transport.open()
            with pytest.raises(TransportError):
                await self.transport.open()
        await self.transport.close(CloseMode.WEBSOCKET)

    @pytest.mark.asyncio
    async def test_send_when_not_connected(self):
        with pytest.raises(TransportError, match=WEBSOCKET_NOT_CONNECTED_ERROR):
            await self.transport.send("PING :x")

    @pytest.mark.asyncio
    async def test_send_emits_message_sent(self):
        ws = FakeWebSocket()
        with patch(CONNECT, new=AsyncMock(return_value=ws)):
            await self.transport.open()
        await self.transport.send("NICK justinfan123")
        ws.send.assert_awaited_once_with("NICK justinfan123")
        assert self._events(TransportEvent.MESSAGE_SENT) == [("NICK justinfan123",)]
        await self.transport.close(CloseMode.WEBSOCKET)

    @pytest.mark.asyncio
    async def test_send_failure_wrapped(self):
        ws = FakeWebSocket()
        ws.send.side_effect = ConnectionClosedOK(None, None)
        with patch(CONNECT, new=AsyncMock(return_value=ws)):
            await self.transport.open()
        with pytest.raises(TransportError) as exc_info:
            await self.transport.send("PRIVMSG #a :b")
        assert exc_info.value.operation_type == "send"
        assert self._events(TransportEvent.MESSAGE_SENT) == []
        await self.transport.close(CloseMode.WEBSOCKET)

    @pytest.mark.asyncio
    async def test_close_irc_sends_quit_first(self):
        ws = FakeWebSocket()
        with patch(CONNECT, new=AsyncMock(return_value=ws)):
            await self.transport.open()
        await self.transport.close(CloseMode.IRC)

        ws.send.assert_awaited_once_with("QUIT")
        ws.close.assert_awaited_once_with(code=1000)
        assert self.transport.state is ConnectionState.DISCONNECTED
        assert self._events(TransportEvent.DISCONNECTED) == [("wss://irc.test:443",)]

    @pytest.mark.asyncio
    async def test_close_websocket_mode_skips_quit(self):
        ws = FakeWebSocket()
        with patch(CONNECT, new=AsyncMock(return_value=ws)):
            await self.transport.open()
        await self.transport.close(CloseMode.WEBSOCKET)
        ws.send.assert_not_awaited()
        assert self.transport.is_connected is False

    @pytest.mark.asyncio
    async def test_close_when_never_opened(self):
        await self.transport.close()
        assert self.seen == []

    @pytest.mark.asyncio
    async def test_remote_close_reports_disconnected(self):
        ws = FakeWebSocket()
        with patch(CONNECT, new=AsyncMock(return_value=ws)):
            await self.transport.open()
        await ws.frames.put(ConnectionClosedOK(None, None))
        await wait_until(lambda: self._events(TransportEvent.DISCONNECTED))
        assert self.transport.state is ConnectionState.DISCONNECTED
        assert self.transport.ws is None

    @pytest.mark.asyncio
    async def test_url_locked_while_connected(self):
        ws = FakeWebSocket()
        with patch(CONNECT, new=AsyncMock(return_value=ws)):
            await self.transport.open()
        with pytest.raises(TransportError):
            self.transport.url = "wss://other:443"
        await self.transport.close(CloseMode.WEBSOCKET)
        self.transport.url = "wss://other:443"
        assert self.transport.url == "wss://other:443"
