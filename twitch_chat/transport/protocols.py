"""Protocol definition for the connection the session controller drives."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..events import EventEmitter
from ..irc.models import CloseMode, ConnectionState


@runtime_checkable
class ChatTransport(Protocol):
    """A line-oriented chat connection.

    ``events`` delivers the ``TransportEvent`` notifications: connected(url),
    state_changed(current, previous), disconnected(url),
    message_received(frame) and message_sent(frame).
    """

    events: EventEmitter

    @property
    def url(self) -> str:
        """Endpoint this transport connects to."""
        ...

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        ...

    @property
    def is_connected(self) -> bool:
        """True while the connection is open."""
        ...

    async def open(self) -> None:
        """Open the connection; connected fires once it is established."""
        ...

    async def close(self, mode: CloseMode = CloseMode.IRC) -> None:
        """Close the connection."""
        ...

    async def send(self, text: str) -> None:
        """Send one protocol line."""
        ...
