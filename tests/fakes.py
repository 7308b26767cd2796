"""Test doubles shared across the unit tests."""

import asyncio
import time
from collections.abc import Callable

from twitch_chat.events import EventEmitter, TransportEvent
from twitch_chat.irc.models import CloseMode, ConnectionState


class FakeTransport:
    """In-memory transport recording every line the client sends."""

    def __init__(self, url: str = "wss://irc.test:443") -> None:
        self.url = url
        self.events = EventEmitter()
        self.state = ConnectionState.DISCONNECTED
        self.sent: list[str] = []
        self.open_calls = 0
        self.close_modes: list[CloseMode] = []
        self.open_error: Exception | None = None
        self.send_error: Exception | None = None

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    async def open(self) -> None:
        self.open_calls += 1
        if self.open_error is not None:
            raise self.open_error
        self.state = ConnectionState.CONNECTED

    async def close(self, mode: CloseMode = CloseMode.IRC) -> None:
        self.close_modes.append(mode)
        self.state = ConnectionState.DISCONNECTED

    async def send(self, text: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(text)
        await self.events.emit(TransportEvent.MESSAGE_SENT, text)

    # Test drivers

    async def fire_connected(self) -> None:
        await self.events.emit(TransportEvent.CONNECTED, self.url)

    async def fire_disconnected(self) -> None:
        self.state = ConnectionState.DISCONNECTED
        await self.events.emit(TransportEvent.DISCONNECTED, self.url)

    async def receive(self, frame: str | bytes) -> None:
        await self.events.emit(TransportEvent.MESSAGE_RECEIVED, frame)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


