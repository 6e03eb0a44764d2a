"""Channel ports implemented by transport adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from .domain import Message, NewMessage


@dataclass(frozen=True)
class Disconnected:
    """Clean end of the inbound message stream."""

    def __str__(self) -> str:
        return "message channel disconnected"


DISCONNECTED = Disconnected()


class Sender(ABC):
    """Delivers outbound messages."""

    @abstractmethod
    async def send(self, message: NewMessage) -> None:
        """Deliver exactly one message.

        Raises:
            TransportError: The platform rejected the message or could not
                be reached. No retry is attempted here.
        """
        ...


class Receiver(ABC):
    """Source of inbound messages."""

    @abstractmethod
    async def receive(self) -> Union[Message, Disconnected]:
        """Wait for the next inbound message.

        Returns:
            The next message, or ``DISCONNECTED`` once the stream has ended.

        Raises:
            TransportError: Fetching updates failed.
        """
        ...
