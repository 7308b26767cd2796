"""Holder for the current session config, swappable between connect cycles."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .model import SessionConfig

ConfigListener = Callable[[SessionConfig, SessionConfig], None]


class ConfigProvider:
    """Thread-safe current ``SessionConfig`` with change notification.

    The client reads ``current`` at connect and handshake time, so an update
    takes effect on the next connection.
    """

    def __init__(self, config: SessionConfig | None = None) -> None:
        self._config = config or SessionConfig()
        self._lock = threading.Lock()
        self._listeners: list[ConfigListener] = []

    @property
    def current(self) -> SessionConfig:
        with self._lock:
            return self._config

    def update(self, config: SessionConfig) -> bool:
        """Replace the current config; returns False when nothing changed."""
        with self._lock:
            previous = self._config
            if previous == config:
                return False
            self._config = config
            listeners = tuple(self._listeners)
        logging.info(f"🔄 Session config updated nickname={config.nickname}")
        for listener in listeners:
            try:
                listener(config, previous)
            except Exception as e:  # noqa: BLE001
                logging.error(f"Config listener failed: {type(e).__name__}: {e}")
        return True

    def add_listener(self, listener: ConfigListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ConfigListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
