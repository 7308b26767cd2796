"""WebSocket transport for Twitch chat built on the websockets library."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..constants import (
    TWITCH_IRC_WSS_URL,
    WEBSOCKET_CLOSE_TIMEOUT_SECONDS,
    WEBSOCKET_NORMAL_CLOSE_CODE,
    WEBSOCKET_OPEN_TIMEOUT_SECONDS,
)
from ..errors import TransportError
from ..events import EventEmitter, TransportEvent
from ..irc.models import CloseMode, ConnectionState, IRCCommand
from ..logs import log_structured_error

WEBSOCKET_NOT_CONNECTED_ERROR = "WebSocket not connected"


class WebSocketTransport:
    """Owns one WebSocket connection and reports it through ``events``.

    Attributes:
        url (str): Chat endpoint.
        ws: Active connection, or None.
        events (EventEmitter): TransportEvent notifications.
    """

    def __init__(
        self,
        url: str = TWITCH_IRC_WSS_URL,
        *,
        open_timeout: float = WEBSOCKET_OPEN_TIMEOUT_SECONDS,
        close_timeout: float = WEBSOCKET_CLOSE_TIMEOUT_SECONDS,
    ) -> None:
        self._url = url
        self.open_timeout = open_timeout
        self.close_timeout = close_timeout
        self.ws: Any | None = None
        self.events = EventEmitter()
        self._state = ConnectionState.DISCONNECTED
        self._receive_task: asyncio.Task[None] | None = None

    @property
    def url(self) -> str:
        return self._url

    @url.setter
    def url(self, value: str) -> None:
        if self.is_connected:
            raise TransportError("Cannot change url while connected", operation_type="open")
        self._url = value

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self.ws is not None

    async def _set_state(self, new_state: ConnectionState) -> None:
        previous = self._state
        if previous is new_state:
            return
        self._state = new_state
        logging.debug(f"🔀 Transport state {previous.value} -> {new_state.value}")
        await self.events.emit(TransportEvent.STATE_CHANGED, new_state, previous)

    async def open(self) -> None:
        """Open the WebSocket; handshake and reading continue on a background task.

        Raises:
            TransportError: If already open or the connection cannot be established.
        """
        if self._state is not ConnectionState.DISCONNECTED:
            raise TransportError(
                f"Cannot open while {self._state.value}", operation_type="open"
            )
        logging.info(f"🔌 Connecting to WebSocket at {self._url}")
        await self._set_state(ConnectionState.CONNECTING)
        try:
            self.ws = await websockets.connect(
                self._url,
                open_timeout=self.open_timeout,
                close_timeout=self.close_timeout,
            )
        except (OSError, TimeoutError, WebSocketException) as e:
            self.ws = None
            await self._set_state(ConnectionState.DISCONNECTED)
            raise TransportError(
                f"WebSocket connection failed: {str(e)}", operation_type="open"
            ) from e
        logging.info("🔌 WebSocket connected successfully")
        await self._set_state(ConnectionState.CONNECTED)
        self._receive_task = asyncio.create_task(
            self._run(self.ws), name=f"chat-transport-{self._url}"
        )

    async def _run(self, ws: Any) -> None:
        await self.events.emit(TransportEvent.CONNECTED, self._url)
        try:
            async for frame in ws:
                await self.events.emit(TransportEvent.MESSAGE_RECEIVED, frame)
        except ConnectionClosed as e:
            logging.warning(f"⚠️ WebSocket closed unexpectedly: {e}")
        except Exception as e:  # noqa: BLE001
            log_structured_error(
                "transport", "WebSocket receive loop failed", e, context={"url": self._url}
            )
        finally:
            if self.ws is ws:
                self.ws = None
            await self._set_state(ConnectionState.DISCONNECTED)
            logging.info(f"🔌 WebSocket disconnected from {self._url}")
            await self.events.emit(TransportEvent.DISCONNECTED, self._url)

    async def send(self, text: str) -> None:
        """Send one line.

        Raises:
            TransportError: If not connected or the send fails.
        """
        ws = self.ws
        if ws is None or self._state is not ConnectionState.CONNECTED:
            raise TransportError(WEBSOCKET_NOT_CONNECTED_ERROR, operation_type="send")
        try:
            await ws.send(text)
        except (ConnectionClosed, WebSocketException, OSError) as e:
            raise TransportError(
                f"WebSocket send failed: {str(e)}", operation_type="send"
            ) from e
        await self.events.emit(TransportEvent.MESSAGE_SENT, text)

    async def close(self, mode: CloseMode = CloseMode.IRC) -> None:
        """Close the connection and wait for the receive loop to finish.

        With ``CloseMode.IRC`` a QUIT line is sent before the close handshake.
        """
        ws = self.ws
        if ws is None:
            return
        if mode is CloseMode.IRC and self.is_connected:
            try:
                await self.send(IRCCommand.QUIT.value)
            except TransportError as e:
                logging.warning(f"⚠️ QUIT not delivered before close: {e}")
        try:
            await ws.close(code=WEBSOCKET_NORMAL_CLOSE_CODE)
        except (WebSocketException, OSError) as e:
            raise TransportError(
                f"WebSocket close failed: {str(e)}", operation_type="close"
            ) from e
        task = self._receive_task
        if task is not None and task is not asyncio.current_task():
            await asyncio.wait({task})
        self._receive_task = None
