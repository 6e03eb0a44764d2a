"""Sedbot — Main entry point."""

import asyncio
import logging
import signal
from typing import Optional

from .adapter.telegram import TelegramChannel
from .app import App
from .commands import HelpCommand, HelpRequestParser, ReplaceCommand, ReplaceRequestParser
from .commands.replace import MATCH_TIMEOUT
from .config import SedbotSettings, load_settings
from .domain import Bot
from .handler import DefaultHandler
from .supervisor import Supervisor

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("sedbot")


def setup_logging(debug: bool = False):
    """Configure root logging once for the process."""
    logging.basicConfig(level=logging.INFO, format=_log_format)
    # python-telegram-bot and httpx log every poll at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    if debug:
        logging.getLogger("sedbot").setLevel(logging.DEBUG)


def build_app(bot: Bot, channel: TelegramChannel, match_timeout: float = MATCH_TIMEOUT) -> App:
    """Wire the help and substitution handlers, help first."""
    return (
        App(bot)
        .handler(DefaultHandler(HelpRequestParser(), HelpCommand(), channel))
        .handler(DefaultHandler(ReplaceRequestParser(), ReplaceCommand(timeout=match_timeout), channel))
    )


async def run_once(settings: SedbotSettings, channel: TelegramChannel):
    """Make sure the channel is polling and dispatch messages until disconnected.

    The channel is shared across restarts, so updates already handled are
    not fetched again.
    """
    await channel.start()
    bot = Bot(handle=settings.handle or channel.username)
    logger.info(f"Dispatching messages as @{bot.handle}.")
    await build_app(bot, channel, settings.match_timeout).run(channel)


async def run(settings: Optional[SedbotSettings] = None) -> bool:
    """Main run loop. Returns False when the failure budget was exhausted."""
    settings = settings or load_settings()
    supervisor = Supervisor(
        max_failures_per_minute=settings.max_failures_per_minute,
        restart_delay=settings.restart_delay,
    )
    channel = TelegramChannel(settings.token, poll_timeout=settings.poll_timeout)

    loop = asyncio.get_running_loop()
    signals = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, channel.close)
            signals.append(sig)
        except (NotImplementedError, RuntimeError):
            pass  # not supported on this platform

    logger.info("Sedbot is running. Press Ctrl+C to stop.")
    try:
        return await supervisor.run(lambda: run_once(settings, channel))
    finally:
        for sig in signals:
            loop.remove_signal_handler(sig)
        await channel.stop()
