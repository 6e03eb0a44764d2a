"""Fakes and factories shared by the test modules."""

from sedbot.domain import (
    NOT_REPLYING,
    Message,
    MessageData,
    ReplyToMessage,
)
from sedbot.errors import TransportError
from sedbot.port import DISCONNECTED, Receiver, Sender

CHAT_ID = 100


def make_message(id, content, reply_to=None, chat_id=CHAT_ID):
    """Build an inbound message, optionally replying to another message."""
    target = ReplyToMessage(reply_to) if reply_to is not None else NOT_REPLYING
    return Message(id=id, data=MessageData(chat_id=chat_id, content=content, reply_target=target))


class FakeSender(Sender):
    """Records every message it is asked to send."""

    def __init__(self, fail_with=None):
        self.sent = []
        self.fail_with = fail_with

    async def send(self, message):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(message)


class FakeReceiver(Receiver):
    """Yields queued messages (or raises queued errors), then disconnects."""

    def __init__(self, items):
        self.items = list(items)
        self.calls = 0

    async def receive(self):
        self.calls += 1
        if not self.items:
            return DISCONNECTED
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeTransportError(TransportError):
    pass
