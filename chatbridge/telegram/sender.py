"""Outbound Telegram messages."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from telegram import Bot
from telegram.error import TelegramError

from chatbridge.exceptions import ReplyDeliveryError

logger = logging.getLogger(__name__)


class ReplySender(ABC):
    """Delivers text to a chat."""

    @abstractmethod
    async def send(self, chat_id: int | str, text: str) -> None:
        """Deliver ``text`` or raise :class:`ReplyDeliveryError`."""


class TelegramReplySender(ReplySender):
    """Sends replies through the Bot API ``sendMessage`` method."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    @classmethod
    def from_token(cls, token: str) -> "TelegramReplySender":
        return cls(Bot(token=token))

    async def send(self, chat_id: int | str, text: str) -> None:
        try:
            await self.bot.send_message(chat_id=chat_id, text=text)
        except TelegramError as e:
            raise ReplyDeliveryError(
                f"Failed to send Telegram message: {e}", chat_id=chat_id
            ) from e
        logger.info(f"Sent message to chat {chat_id}")

    async def shutdown(self) -> None:
        await self.bot.shutdown()
