"""Session controller for one Twitch chat connection."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..config.model import SessionConfig
from ..config.provider import ConfigProvider
from ..constants import JOIN_QUEUE_POLL_INTERVAL
from ..errors import AlreadyConnectedError, AlreadyDisconnectedError
from ..events import ClientEvent, EventEmitter, SubscriptionGroup, TransportEvent
from ..irc.models import WELCOME_COMMANDS, CloseMode, ConnectionState, IRCCommand
from ..logs import log_structured_error
from ..messages.message import TwitchMessage
from ..messages.parser import TwitchParser
from ..transport.protocols import ChatTransport
from .join_scheduler import JoinScheduler

_LINE_SEPARATOR = re.compile(r"\r?\n")


class TwitchChatClient:
    """Drives one transport through connect, handshake, dispatch and disconnect.

    Observers register on ``events`` using ``ClientEvent`` names:

    * connected(url) after the handshake frames went out
    * disconnected(url)
    * state_changed(current, previous), forwarded from the transport
    * message_received(TwitchMessage) for every inbound line
    * message_sent(TwitchMessage) for every line the transport sent
    * authorized(TwitchMessage) for every welcome reply

    Attributes:
        transport: The connection owned by this client.
        config_provider (ConfigProvider): Source of the current SessionConfig.
        parser (TwitchParser): Line tokenizer.
        join_scheduler (JoinScheduler): Membership queue and loop.
        events (EventEmitter): Client-level notifications.
    """

    def __init__(
        self,
        transport: ChatTransport,
        config: SessionConfig | ConfigProvider | None = None,
        parser: TwitchParser | None = None,
        *,
        join_interval: float = JOIN_QUEUE_POLL_INTERVAL,
    ) -> None:
        self.transport = transport
        if isinstance(config, ConfigProvider):
            self.config_provider = config
        else:
            self.config_provider = ConfigProvider(config)
        self.parser = parser or TwitchParser()
        self.join_scheduler = JoinScheduler(transport, poll_interval=join_interval)
        self.events = EventEmitter()
        self.authorized = False
        self._subscriptions = SubscriptionGroup()

    @property
    def config(self) -> SessionConfig:
        return self.config_provider.current

    @property
    def is_connected(self) -> bool:
        return self.transport.is_connected

    @property
    def joined_channels(self) -> frozenset[str]:
        return self.join_scheduler.joined_channels

    @property
    def pending_channels(self) -> tuple[str, ...]:
        return self.join_scheduler.pending_channels

    # Connection lifecycle

    async def connect(self) -> None:
        """Open the transport; the handshake runs once it reports connected.

        Raises:
            AlreadyConnectedError: If the transport is connected or connecting.
            ConfigurationError: If the nickname is empty or whitespace.
            TransportError: If the transport cannot be opened.
        """
        if self.transport.is_connected:
            raise AlreadyConnectedError("Already connected, disconnect first.")
        if self.transport.state is not ConnectionState.DISCONNECTED:
            raise AlreadyConnectedError(
                f"Connection already in progress ({self.transport.state.value}).",
                data={"state": self.transport.state.value},
            )
        self.config.ensure_connectable()

        logging.info(f"🔌 Connecting to {self.transport.url}...")
        self._subscribe()
        try:
            await self.transport.open()
        except Exception:
            self._unsubscribe()
            raise

    async def disconnect(self) -> None:
        """Stop dispatch and the join loop, then close the transport gracefully.

        Raises:
            AlreadyDisconnectedError: If the transport is not connected.
        """
        if not self.transport.is_connected:
            raise AlreadyDisconnectedError("Already disconnected, connect first.")

        logging.info("🔌 Disconnecting...")
        self._unsubscribe()
        await self.join_scheduler.stop()
        self.authorized = False
        await self.transport.close(CloseMode.IRC)
        await self.events.emit(ClientEvent.DISCONNECTED, self.transport.url)

    async def send_message(self, text: str) -> None:
        await self.transport.send(text)

    # Membership

    def join_channel(self, *channels: str) -> None:
        self.join_channels(channels)

    def join_channels(self, channels: Iterable[str]) -> None:
        self.join_scheduler.enqueue(channels)

    async def part_channel(self, *channels: str) -> None:
        await self.part_channels(channels)

    async def part_channels(self, channels: Iterable[str]) -> None:
        await self.join_scheduler.part(channels)

    # Transport event handlers

    def _subscribe(self) -> None:
        self._unsubscribe()
        events = self.transport.events
        self._subscriptions.subscribe(events, TransportEvent.CONNECTED, self._on_connected)
        self._subscriptions.subscribe(
            events, TransportEvent.STATE_CHANGED, self._on_state_changed
        )
        self._subscriptions.subscribe(
            events, TransportEvent.DISCONNECTED, self._on_disconnected
        )
        self._subscriptions.subscribe(
            events, TransportEvent.MESSAGE_RECEIVED, self._on_message_received
        )
        self._subscriptions.subscribe(events, TransportEvent.MESSAGE_SENT, self._on_message_sent)

    def _unsubscribe(self) -> None:
        self._subscriptions.unsubscribe_all()

    async def _on_connected(self, url: str) -> None:
        logging.info(f"✅ Connected to {url}")
        try:
            await self._handshake()
        except Exception as e:
            log_structured_error("handshake", "Handshake failed", e, context={"url": url})
            self._unsubscribe()
            await self.join_scheduler.stop()
            raise
        await self.events.emit(ClientEvent.CONNECTED, url)

    async def _handshake(self) -> None:
        config = self.config
        if config.oauth_token:
            await self.transport.send(f"{IRCCommand.PASS} {config.oauth_token}")
        await self.transport.send(f"{IRCCommand.NICK} {config.login}")
        for capability in config.capabilities:
            await self.transport.send(f"{IRCCommand.CAP} REQ :{capability}")
        self.join_scheduler.rejoin()
        self.join_scheduler.start()

    async def _on_state_changed(
        self, current: ConnectionState, previous: ConnectionState
    ) -> None:
        await self.events.emit(ClientEvent.STATE_CHANGED, current, previous)

    async def _on_disconnected(self, url: str) -> None:
        logging.info(f"🔌 Disconnected from {url}")
        await self.join_scheduler.stop()
        self.authorized = False
        await self.events.emit(ClientEvent.DISCONNECTED, url)

    async def _on_message_received(self, frame: str | bytes) -> None:
        if isinstance(frame, bytes):
            frame = frame.decode("utf-8", errors="replace")
        for line in _LINE_SEPARATOR.split(frame):
            if not line.strip():
                continue
            message = self.parser.parse_message(line)
            await self.events.emit(ClientEvent.MESSAGE_RECEIVED, message)

            if message.command == IRCCommand.PING:
                await self.transport.send(f"{IRCCommand.PONG} {' '.join(message.parameters)}")
            elif message.command in WELCOME_COMMANDS:
                logging.info("🔑 Authorized")
                self.authorized = True
                await self.events.emit(ClientEvent.AUTHORIZED, message)

    async def _on_message_sent(self, frame: str | bytes) -> None:
        if isinstance(frame, bytes):
            frame = frame.decode("utf-8", errors="replace")
        line = frame.strip("\r\n")
        if not line.strip():
            return
        message: TwitchMessage = self.parser.parse_message(line)
        await self.events.emit(ClientEvent.MESSAGE_SENT, message)
