"""
Config file watcher that hot-reloads the session config into a provider
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..errors import ConfigurationError
from .loader import load_session_config
from .provider import ConfigProvider


class ConfigFileHandler(FileSystemEventHandler):
    """File system event handler for one config file"""

    def __init__(self, config_file: str, watcher: ConfigWatcher) -> None:
        super().__init__()
        self.config_file = os.path.abspath(config_file)
        self.watcher = watcher
        self.last_modified = 0.0

    def _should_process(self) -> bool:
        """Check if the config file's mtime advanced since last processed."""
        try:
            mtime = os.path.getmtime(self.config_file)
        except FileNotFoundError:
            return False
        if mtime <= self.last_modified:
            return False
        self.last_modified = mtime
        return True

    def _handle_event(self, src_path: str | bytes) -> None:
        if isinstance(src_path, bytes):
            src_path = os.fsdecode(src_path)
        if os.path.abspath(src_path) != self.config_file:
            return
        if self._should_process():
            self.watcher.reload()

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle_event(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle_event(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors that save atomically move a temp file over the target
        self._handle_event(getattr(event, "dest_path", "") or event.src_path)


class ConfigWatcher:
    """Watches the config file and pushes valid changes into a ConfigProvider.

    Reloaded settings apply on the next connect; an invalid file is logged
    and the current config is kept.
    """

    def __init__(self, config_file: str, provider: ConfigProvider) -> None:
        self.config_file = config_file
        self.provider = provider
        self.observer: Observer | None = None
        self.running = False
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start watching the config file"""
        if self.running:
            return
        config_dir = os.path.dirname(os.path.abspath(self.config_file))
        if not os.path.isdir(config_dir):
            logging.warning(f"📁 Config directory missing, not watching: {config_dir}")
            return
        observer = Observer()
        try:
            observer.schedule(
                ConfigFileHandler(self.config_file, self), config_dir, recursive=False
            )
            observer.start()
        except Exception as e:  # noqa: BLE001
            logging.error(f"👀 Config watcher failed to start: {type(e).__name__}: {e}")
            return
        self.observer = observer
        self.running = True
        logging.info(f"👀 Watching config file {self.config_file}")

    def stop(self) -> None:
        """Stop watching the config file"""
        observer = self.observer
        if self.running and observer is not None:
            try:
                observer.stop()
                observer.join()
            finally:
                self.running = False
                self.observer = None
                logging.debug("👀 Config watcher stopped")

    def reload(self) -> bool:
        """Re-read the file into the provider; returns True if the config changed."""
        with self._lock:
            try:
                config = load_session_config(self.config_file)
            except ConfigurationError as e:
                logging.error(f"⚠️ Ignoring invalid config change: {e}")
                return False
            return self.provider.update(config)


async def create_config_watcher(config_file: str, provider: ConfigProvider) -> ConfigWatcher:
    """Create and start a config file watcher"""
    watcher = ConfigWatcher(config_file, provider)
    # Observer start spawns a thread; keep it off the event loop
    await asyncio.get_running_loop().run_in_executor(None, watcher.start)
    return watcher
