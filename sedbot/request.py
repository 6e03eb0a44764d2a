"""Request parser contract."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .domain import Bot, Message


class Parser(ABC):
    """Recognizes whether a message names a command.

    ``parse`` returns None when the text is not this parser's command and
    a typed request when it is. Malformed text that clearly tried to be
    the command raises a ``ParseError``.
    """

    @abstractmethod
    def parse(self, bot: Bot, message: Message) -> Optional[Any]:
        ...
