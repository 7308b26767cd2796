"""
Command line client: connect, join channels and log chat until interrupted
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from .client import create_client
from .config import ConfigProvider, create_config_watcher, load_session_config
from .config.loader import get_config_path, load_raw_config
from .errors import ChatClientError
from .events import ClientEvent
from .irc.models import IRCCommand
from .logs import LoggerConfigurator, log_structured_error
from .messages import TwitchMessage
from .utils import connect_with_retry


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Connect to Twitch chat and log channel messages.")
    parser.add_argument("channels", nargs="*", help="Channels to join")
    parser.add_argument("--config", help="Path to the JSON config file")
    parser.add_argument("--nick", help="Nickname override")
    parser.add_argument("--url", help="Chat endpoint override")
    parser.add_argument(
        "--health-check", action="store_true", help="Validate the configuration and exit"
    )
    return parser.parse_args(argv)


def log_chat_message(message: TwitchMessage) -> None:
    if message.command == IRCCommand.PRIVMSG:
        author = message.display_name or message.nick or "?"
        logging.info(f"💬 {message.channel} {author}: {message.text}")
    else:
        logging.debug(f"⬅️ {message.raw}")


def log_sent_message(message: TwitchMessage) -> None:
    # Credentials must not reach the logs
    if message.command == IRCCommand.PASS:
        logging.debug("➡️ PASS ***")
    else:
        logging.debug(f"➡️ {message.raw}")


async def run(args: argparse.Namespace) -> int:
    config_path = get_config_path(args.config)
    config = load_session_config(config_path)
    if args.nick:
        config = config.model_copy(update={"nickname": args.nick})
    config.ensure_connectable()

    channels = list(args.channels) or list(load_raw_config(config_path).get("channels", []))
    if args.health_check:
        logging.info(f"✅ Health check passed - nickname={config.nickname} channels={len(channels)}")
        return 0

    provider = ConfigProvider(config)
    watcher = await create_config_watcher(str(config_path), provider)
    client = create_client(provider, url=args.url)
    client.events.on(ClientEvent.MESSAGE_RECEIVED, log_chat_message)
    client.events.on(ClientEvent.MESSAGE_SENT, log_sent_message)
    client.events.on(
        ClientEvent.AUTHORIZED, lambda _msg: logging.info(f"🔑 Logged in as {provider.current.login}")
    )

    shutdown = asyncio.Event()
    connection_lost = asyncio.Event()
    client.events.on(
        ClientEvent.DISCONNECTED,
        lambda _url: None if shutdown.is_set() else connection_lost.set(),
    )
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except NotImplementedError:  # pragma: no cover - Windows
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(shutdown.set))

    try:
        client.join_channels(channels)
        await connect_with_retry(client)
        while await wait_for_either(shutdown, connection_lost) is connection_lost:
            connection_lost.clear()
            logging.warning("🔁 Connection lost, reconnecting")
            await connect_with_retry(client)
        logging.warning("🛑 Shutdown requested")
    finally:
        watcher.stop()
        if client.is_connected:
            await client.disconnect()
    return 0


async def wait_for_either(first: asyncio.Event, second: asyncio.Event) -> asyncio.Event:
    """Return whichever event is set first; ``first`` wins ties."""
    waiters = {
        asyncio.create_task(first.wait()): first,
        asyncio.create_task(second.wait()): second,
    }
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in waiters:
            task.cancel()
    return first if first.is_set() else second


def main(argv: list[str] | None = None) -> int:
    LoggerConfigurator().configure()
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ChatClientError as e:
        logging.error(f"❌ {e}")
        return 1
    except Exception as e:  # noqa: BLE001
        log_structured_error("main", "Top-level error", e)
        logging.critical(f"Critical error occurred: {e}", exc_info=True)
        return 1
    finally:
        logging.info("🏁 Application shutdown complete")

