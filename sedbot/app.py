"""Dispatch loop: pulls messages and offers them to handlers in order."""

import logging

from .domain import Bot
from .errors import TransportError
from .handler import Handler
from .port import Disconnected, Receiver

logger = logging.getLogger("sedbot.app")


class AppError(Exception):
    """Transport failure that ended a dispatch loop run."""
    pass


class ReceiverError(AppError):
    """Receiving the next message failed."""
    pass


class HandlerError(AppError):
    """A handler failed to deliver its reply."""
    pass


class App:
    """Ordered handler list around one receiver.

    Usage:
        app = App(bot).handler(help_handler).handler(replace_handler)
        await app.run(channel)

    Messages are processed strictly one at a time, in arrival order. The
    first handler that claims a message stops the offering; a message no
    handler claims is dropped.
    """

    def __init__(self, bot: Bot):
        self.bot = bot
        self.handlers: list[Handler] = []

    def handler(self, handler: Handler) -> "App":
        self.handlers.append(handler)
        return self

    async def run(self, receiver: Receiver) -> None:
        """Run until the receiver disconnects.

        Raises:
            ReceiverError: The receiver failed.
            HandlerError: A handler failed to send.
        """
        while True:
            try:
                message = await receiver.receive()
            except TransportError as e:
                raise ReceiverError(str(e)) from e

            if isinstance(message, Disconnected):
                logger.info("Receiver disconnected, stopping dispatch loop.")
                return

            for handler in self.handlers:
                try:
                    claimed = await handler.run(self.bot, message)
                except TransportError as e:
                    raise HandlerError(str(e)) from e
                if claimed:
                    break
            else:
                logger.debug(f"No handler claimed message {message.id}, dropped.")
