"""Handlers bind a parser, a command and a sender into one unit."""

import logging
from abc import ABC, abstractmethod

from .command import Command
from .domain import Bot, Message, MessageData, NewMessage, ReplyToMessageId
from .errors import CommandError, ParseError
from .port import Sender
from .request import Parser

logger = logging.getLogger("sedbot.handler")


class Handler(ABC):
    """Attempts to fully process one inbound message."""

    @abstractmethod
    async def run(self, bot: Bot, message: Message) -> bool:
        """Process ``message`` if it is meant for this handler.

        Returns:
            True when the message was claimed, False when the next handler
            should be tried.
        """
        ...


def error_reply(message: Message, error: Exception) -> NewMessage:
    """Build a reply to ``message`` describing ``error``."""
    return NewMessage(
        data=MessageData(
            chat_id=message.data.chat_id,
            content=str(error),
            reply_target=ReplyToMessageId(message.id),
        )
    )


class DefaultHandler(Handler):
    """Parse, execute, send.

    Parse and command errors are answered with a reply to the triggering
    message and count as claimed. Transport errors from the sender
    propagate.
    """

    def __init__(self, parser: Parser, command: Command, sender: Sender):
        self.parser = parser
        self.command = command
        self.sender = sender

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(parser={self.parser!r}, "
            f"command={self.command!r})"
        )

    async def run(self, bot: Bot, message: Message) -> bool:
        try:
            request = self.parser.parse(bot, message)
        except ParseError as e:
            logger.debug(f"Parse error on message {message.id}: {e}")
            await self.sender.send(error_reply(message, e))
            return True

        if request is None:
            return False

        try:
            reply = self.command.execute(request)
        except CommandError as e:
            logger.debug(f"Command error on message {message.id}: {e}")
            reply = error_reply(message, e)

        await self.sender.send(reply)
        return True
