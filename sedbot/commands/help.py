"""The /help command."""

from dataclasses import dataclass
from typing import Optional

from ..command import Command
from ..domain import Bot, Message, MessageData, NewMessage, ReplyToMessageId
from ..request import Parser

HELP_TEXT = (
    "This bot performs replacements on messages based on regular expressions.\n\n"
    "- /help -- shows this message\n\n"
    "- s/regex/replacement/flags -- performs a replacement in the message "
    "you're replying to.\n\n"
    "Flags: i (case insensitive), m (multi-line), s (dot matches new line), "
    "U (swap greed), x (ignore whitespace), o (octal escapes), "
    "g (replace all matches).\n"
    "Use \\1 or $1 in the replacement to insert a captured group."
)


@dataclass(frozen=True)
class HelpRequest:
    original_message_id: object
    chat_id: object


class HelpRequestParser(Parser):
    """Recognizes ``/help`` and ``/help@<handle>``. Never fails."""

    def __repr__(self) -> str:
        return "HelpRequestParser()"

    def parse(self, bot: Bot, message: Message) -> Optional[HelpRequest]:
        text = message.data.content.strip()
        matches = text == "/help"
        if not matches and bot.handle:
            head, sep, tail = text.partition("@")
            matches = bool(sep) and head == "/help" and tail == bot.handle
        if not matches:
            return None
        return HelpRequest(
            original_message_id=message.id,
            chat_id=message.data.chat_id,
        )


class HelpCommand(Command):
    """Replies with the usage text. Never fails."""

    def __repr__(self) -> str:
        return "HelpCommand()"

    def execute(self, request: HelpRequest) -> NewMessage:
        return NewMessage(
            data=MessageData(
                chat_id=request.chat_id,
                content=HELP_TEXT,
                reply_target=ReplyToMessageId(request.original_message_id),
            )
        )
