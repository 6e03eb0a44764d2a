"""Domain model: messages, reply targets and the bot session context."""

from dataclasses import dataclass, replace
from typing import Generic, Optional, Protocol, TypeVar, Union


class Id(Protocol):
    """Capability required of message and chat identifiers.

    Identifiers only need to be comparable, orderable, hashable and
    printable. Telegram's integer ids qualify as they are.
    """

    def __eq__(self, other: object) -> bool: ...

    def __lt__(self, other) -> bool: ...

    def __hash__(self) -> int: ...

    def __str__(self) -> str: ...


M = TypeVar("M", bound=Id)
C = TypeVar("C", bound=Id)


@dataclass(frozen=True)
class Prunned:
    """A reply link exists but was not resolved any further."""


@dataclass(frozen=True)
class NotReplying:
    """The message is not a reply to anything."""


PRUNNED = Prunned()
NOT_REPLYING = NotReplying()


@dataclass(frozen=True)
class ReplyToMessageId(Generic[M]):
    """Only the id of the replied-to message is known."""

    message_id: M


@dataclass(frozen=True)
class ReplyToMessage(Generic[M, C]):
    """The fully resolved message being replied to.

    Resolution stops after one level: if the nested message is itself a
    reply, its own reply target is replaced by ``PRUNNED``.
    """

    message: "Message[M, C]"

    def __post_init__(self):
        nested = self.message.data.reply_target
        if not isinstance(nested, (NotReplying, Prunned)):
            object.__setattr__(self, "message", self.message.pruned())


ReplyTarget = Union[ReplyToMessage, ReplyToMessageId, Prunned, NotReplying]


def reply_message_id(target: ReplyTarget):
    """Return the message id an outbound reply should point at, if any."""
    if isinstance(target, ReplyToMessage):
        return target.message.id
    if isinstance(target, ReplyToMessageId):
        return target.message_id
    return None


@dataclass(frozen=True)
class MessageData(Generic[M, C]):
    """Payload shared by inbound and outbound messages."""

    chat_id: C
    content: str
    reply_target: ReplyTarget = NOT_REPLYING


@dataclass(frozen=True)
class Message(Generic[M, C]):
    """An inbound message, already delivered and identified by the platform."""

    id: M
    data: MessageData[M, C]

    def pruned(self) -> "Message[M, C]":
        """Copy of this message whose reply chain is cut at this level."""
        if isinstance(self.data.reply_target, NotReplying):
            return self
        return replace(self, data=replace(self.data, reply_target=PRUNNED))

    def replied_message(self) -> Optional["Message[M, C]"]:
        """The resolved message this one replies to, or None."""
        target = self.data.reply_target
        if isinstance(target, ReplyToMessage):
            return target.message
        return None


@dataclass(frozen=True)
class NewMessage(Generic[M, C]):
    """An outbound message not yet assigned an id by the platform."""

    data: MessageData[M, C]


@dataclass(frozen=True)
class Bot:
    """Read-only session context of the running bot.

    Attributes:
        handle: The bot's own mention handle (without ``@``), if known.
    """

    handle: Optional[str] = None
