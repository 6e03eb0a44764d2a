"""Telegram channel adapter."""

import asyncio
import logging
from typing import Optional, Union

from telegram import Bot, ReplyParameters, Update
from telegram import Message as TgMessage
from telegram.error import NetworkError, TelegramError
from telegram.ext import Updater

from ..domain import (
    NOT_REPLYING,
    PRUNNED,
    Message,
    MessageData,
    NewMessage,
    ReplyTarget,
    ReplyToMessage,
    ReplyToMessageId,
    reply_message_id,
)
from ..errors import TransportError
from ..port import DISCONNECTED, Disconnected, Receiver, Sender

logger = logging.getLogger("sedbot.telegram")

ALLOWED_UPDATES = ["message", "channel_post"]
_INIT_RETRY_DELAYS = [2, 5, 10, 15]


class ChannelError(TransportError):
    """A Telegram API call failed."""
    pass


def message_from_telegram(tg_message: TgMessage, resolve_reply: bool = True) -> Optional[Message]:
    """Translate a Telegram message or channel post.

    Only text messages are translated. The reply chain is resolved one
    level deep: the replied-to message gets ``PRUNNED`` as its own reply
    target if it is itself a reply. A reply to a non-text message keeps
    only its id.

    Returns:
        The domain message, or None for non-text messages.
    """
    if tg_message.text is None:
        return None

    reply = tg_message.reply_to_message
    reply_target: ReplyTarget
    if reply is None:
        reply_target = NOT_REPLYING
    elif not resolve_reply:
        reply_target = PRUNNED
    else:
        nested = message_from_telegram(reply, resolve_reply=False)
        if nested is None:
            reply_target = ReplyToMessageId(reply.message_id)
        else:
            reply_target = ReplyToMessage(nested)

    return Message(
        id=tg_message.message_id,
        data=MessageData(
            chat_id=tg_message.chat_id,
            content=tg_message.text,
            reply_target=reply_target,
        ),
    )


class TelegramChannel(Sender, Receiver):
    """Telegram channel over the library's long-polling ``Updater``.

    The updater fetches updates in the background and keeps the update
    offset, so one channel can be reused across dispatch loop restarts
    without receiving already handled updates again.

    Usage:
        channel = TelegramChannel(token)
        try:
            await channel.start()
            await app.run(channel)
        finally:
            await channel.stop()
    """

    def __init__(self, token: str, poll_timeout: int = 30, updater: Optional[Updater] = None):
        if updater is None:
            updater = Updater(Bot(token), update_queue=asyncio.Queue())
        self.updater = updater
        self.poll_timeout = poll_timeout
        self._initialized = False
        self._closed = asyncio.Event()

    def __repr__(self) -> str:
        return f"TelegramChannel(poll_timeout={self.poll_timeout})"

    @property
    def bot(self) -> Bot:
        return self.updater.bot

    @property
    def username(self) -> str:
        """The bot's own username. Only available after ``start()``."""
        return self.bot.username

    async def start(self):
        """Initialize the bot and start polling. Does nothing if already polling."""
        if self.updater.running:
            return
        if not self._initialized:
            await self._initialize()
        try:
            await self.updater.start_polling(
                timeout=self.poll_timeout,
                allowed_updates=ALLOWED_UPDATES,
                drop_pending_updates=False,
                error_callback=self._on_poll_error,
            )
        except TelegramError as e:
            raise ChannelError(f"Telegram polling failed to start: {e}") from e
        logger.info(f"Telegram bot @{self.username} polling.")

    async def _initialize(self):
        # getMe; transient network timeouts shouldn't kill the bot
        for attempt, delay in enumerate(_INIT_RETRY_DELAYS + [None], start=1):
            try:
                await self.updater.initialize()
                self._initialized = True
                return
            except NetworkError as e:
                if delay is None:
                    raise ChannelError(f"Telegram init failed: {e}") from e
                logger.warning(
                    f"Telegram init failed (attempt {attempt}/{len(_INIT_RETRY_DELAYS) + 1}): "
                    f"{type(e).__name__}: {e}. Retrying in {delay}s..."
                )
                await asyncio.sleep(delay)
            except TelegramError as e:
                raise ChannelError(f"Telegram init failed: {e}") from e

    def _on_poll_error(self, error: TelegramError):
        logger.warning(f"Telegram polling error, retrying: {type(error).__name__}: {error}")

    async def stop(self):
        """Stop polling and shut the bot down. Safe to call after a failed start."""
        self.close()
        try:
            if self.updater.running:
                await self.updater.stop()
            if self._initialized:
                await self.updater.shutdown()
                self._initialized = False
        except TelegramError as e:
            logger.warning(f"Telegram shutdown failed: {e}")

    def close(self):
        """Make a pending or the next ``receive()`` report disconnection."""
        self._closed.set()

    async def send(self, message: NewMessage) -> None:
        reply_to = reply_message_id(message.data.reply_target)
        reply_parameters = None
        if reply_to is not None:
            reply_parameters = ReplyParameters(
                message_id=reply_to,
                allow_sending_without_reply=True,
            )
        try:
            await self.bot.send_message(
                chat_id=message.data.chat_id,
                text=message.data.content,
                reply_parameters=reply_parameters,
            )
        except TelegramError as e:
            raise ChannelError(f"sendMessage to {message.data.chat_id} failed: {e}") from e

    async def receive(self) -> Union[Message, Disconnected]:
        queue = self.updater.update_queue
        while not self._closed.is_set():
            if not self.updater.running and queue.empty():
                raise ChannelError("Telegram polling is not running")

            update = await self._next_update(queue)
            if update is None:
                break
            tg_message = update.message or update.channel_post
            if tg_message is None:
                continue
            message = message_from_telegram(tg_message)
            if message is None:
                logger.debug(f"Skipping non-text update {update.update_id}")
                continue
            return message

        return DISCONNECTED

    async def _next_update(self, queue: asyncio.Queue) -> Optional[Update]:
        """Wait for the next update, or None once the channel is closed."""
        getter = asyncio.ensure_future(queue.get())
        closed = asyncio.ensure_future(self._closed.wait())
        try:
            done, _ = await asyncio.wait({getter, closed}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            closed.cancel()
        if getter in done:
            return getter.result()
        getter.cancel()
        return None
