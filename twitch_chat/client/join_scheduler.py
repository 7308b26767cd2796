"""Throttled channel membership: pending JOIN queue plus the joined set."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from collections.abc import Iterable

from ..constants import JOIN_QUEUE_POLL_INTERVAL
from ..irc.models import IRCCommand
from ..logs import log_structured_error
from ..transport.protocols import ChatTransport


def normalize_channel(name: str) -> str:
    """Prefix ``#`` when missing; case is preserved."""
    return name if name.startswith("#") else f"#{name}"


def channel_key(name: str) -> str:
    """Form stored in the joined set: ``#``-prefixed and lower-cased."""
    return normalize_channel(name).lower()


class JoinScheduler:
    """Serializes JOIN/PART frames for one transport.

    The pending queue and the joined set are touched both by the public API
    (caller's context, possibly a transport callback thread) and by the
    background loop, so every access goes through ``_lock``. Channels enter
    the joined set when their JOIN is sent, not when the server confirms it.
    A JOIN that fails to send goes back to the front of the queue.

    Attributes:
        transport: Connection JOIN/PART frames are sent through.
        poll_interval (float): Sleep between queue checks without backlog.
    """

    def __init__(
        self, transport: ChatTransport, *, poll_interval: float = JOIN_QUEUE_POLL_INTERVAL
    ) -> None:
        self.transport = transport
        self.poll_interval = poll_interval
        self._lock = threading.Lock()
        self._pending: deque[str] = deque()
        self._joined: set[str] = set()
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def joined_channels(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._joined)

    @property
    def pending_channels(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._pending)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def enqueue(self, channels: Iterable[str]) -> None:
        """Queue a JOIN for each channel; already joined channels are sent again."""
        for channel in channels:
            if not channel or not channel.strip():
                logging.warning("⚠️ Skipping blank channel name")
                continue
            normalized = normalize_channel(channel)
            with self._lock:
                self._pending.append(normalized)
            logging.info(f"➕ Add channel {normalized} to join queue")

    def rejoin(self) -> None:
        """Queue every channel believed joined, for a fresh connection."""
        channels = sorted(self.joined_channels)
        if channels:
            logging.info(f"🔁 Rejoining {len(channels)} channel(s)")
        self.enqueue(channels)

    async def part(self, channels: Iterable[str]) -> None:
        """Leave each channel in order, one PART at a time.

        Transport errors propagate to the caller; channels before the failing
        one have already been parted.
        """
        for channel in channels:
            if not channel or not channel.strip():
                logging.warning("⚠️ Skipping blank channel name")
                continue
            normalized = normalize_channel(channel)
            with self._lock:
                self._joined.discard(channel_key(normalized))
            logging.info(f"👋 Leave from {normalized}")
            await self.transport.send(f"{IRCCommand.PART} {normalized}")

    def start(self) -> None:
        if self.running:
            logging.debug("Join scheduler already running")
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stop_event), name="join-scheduler")
        self._task.add_done_callback(self._on_task_done)
        logging.debug("🚦 Join scheduler started")

    async def stop(self) -> None:
        """Signal the loop and wait for it to exit; an in-flight JOIN completes."""
        task = self._task
        if self._stop_event is not None:
            self._stop_event.set()
        if task is None:
            return
        if task is not asyncio.current_task():
            await asyncio.wait({task})
        if self._task is task:
            self._task = None
        logging.debug("🚦 Join scheduler stopped")

    def _next_channel(self) -> str | None:
        with self._lock:
            if not self._pending:
                return None
            channel = channel_key(self._pending.popleft())
            self._joined.add(channel)
            return channel

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            channel = self._next_channel() if self.transport.is_connected else None
            if channel is None:
                await self._wait(stop_event)
                continue
            logging.info(f"🚪 Join to {channel}")
            try:
                await self.transport.send(f"{IRCCommand.JOIN} {channel}")
            except Exception as e:  # noqa: BLE001
                with self._lock:
                    self._joined.discard(channel)
                    self._pending.appendleft(channel)
                log_structured_error(
                    "join", f"Failed to send JOIN for {channel}", e, context={"channel": channel}
                )
                await self._wait(stop_event)

    async def _wait(self, stop_event: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self.poll_interval)
        except TimeoutError:
            pass

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            logging.debug("🚦 Join scheduler task cancelled")
            return
        error = task.exception()
        if error is not None:
            log_structured_error("join", "Join scheduler loop crashed", error)
