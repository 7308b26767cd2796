"""Observer registration and fan-out shared by the transport and the client."""

from __future__ import annotations

import inspect
import logging
import threading
from collections import defaultdict
from collections.abc import Callable, Hashable
from enum import StrEnum
from typing import Any

from .logs import log_structured_error

Handler = Callable[..., Any]


class TransportEvent(StrEnum):
    CONNECTED = "connected"  # (url)
    STATE_CHANGED = "state_changed"  # (current, previous)
    DISCONNECTED = "disconnected"  # (url)
    MESSAGE_RECEIVED = "message_received"  # (raw frame text)
    MESSAGE_SENT = "message_sent"  # (raw frame text or bytes)


class ClientEvent(StrEnum):
    CONNECTED = "connected"  # (url)
    STATE_CHANGED = "state_changed"  # (current, previous)
    DISCONNECTED = "disconnected"  # (url)
    MESSAGE_RECEIVED = "message_received"  # (TwitchMessage)
    MESSAGE_SENT = "message_sent"  # (TwitchMessage)
    AUTHORIZED = "authorized"  # (TwitchMessage)


class EventEmitter:
    """Named events with any number of sync or async handlers.

    Registration is thread-safe; ``emit`` works on a snapshot so handlers may
    subscribe or unsubscribe while an event is being delivered. A failing
    handler is reported and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: dict[Hashable, list[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event: Hashable, handler: Handler) -> None:
        with self._lock:
            self._handlers[event].append(handler)

    def off(self, event: Hashable, handler: Handler) -> bool:
        with self._lock:
            handlers = self._handlers.get(event)
            if not handlers or handler not in handlers:
                return False
            handlers.remove(handler)
            return True

    def handlers(self, event: Hashable) -> tuple[Handler, ...]:
        with self._lock:
            return tuple(self._handlers.get(event, ()))

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    async def emit(self, event: Hashable, *args: Any) -> None:
        for handler in self.handlers(event):
            try:
                if inspect.iscoroutinefunction(handler):
                    await handler(*args)
                else:
                    maybe = handler(*args)
                    if inspect.isawaitable(maybe):
                        await maybe
            except Exception as e:  # noqa: BLE001
                log_structured_error(
                    "event_handler",
                    f"Handler for '{event}' failed",
                    e,
                    context={"handler": getattr(handler, "__qualname__", repr(handler))},
                )


class SubscriptionGroup:
    """Handlers registered together and always removed together."""

    def __init__(self) -> None:
        self._entries: list[tuple[EventEmitter, Hashable, Handler]] = []
        self._lock = threading.Lock()

    def subscribe(self, emitter: EventEmitter, event: Hashable, handler: Handler) -> None:
        emitter.on(event, handler)
        with self._lock:
            self._entries.append((emitter, event, handler))

    def unsubscribe_all(self) -> int:
        with self._lock:
            entries, self._entries = self._entries, []
        for emitter, event, handler in entries:
            emitter.off(event, handler)
        if entries:
            logging.debug(f"🔕 Removed {len(entries)} event subscriptions")
        return len(entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
