"""Command contract."""

from abc import ABC, abstractmethod
from typing import Any

from .domain import NewMessage


class Command(ABC):
    """Turns a parsed request into an outbound message.

    Execution is synchronous and does no I/O. Failures are raised as
    ``CommandError`` and shown to the user by the handler.
    """

    @abstractmethod
    def execute(self, request: Any) -> NewMessage:
        ...
