"""Tests for the Telegram reply sender."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.error import NetworkError

from chatbridge.exceptions import ReplyDeliveryError
from chatbridge.telegram.sender import TelegramReplySender


@pytest.mark.asyncio
async def test_send_uses_send_message() -> None:
    bot = MagicMock()
    bot.send_message = AsyncMock()

    await TelegramReplySender(bot).send(42, "Hello")

    bot.send_message.assert_awaited_once_with(chat_id=42, text="Hello")


@pytest.mark.asyncio
async def test_telegram_error_becomes_delivery_error() -> None:
    bot = MagicMock()
    bot.send_message = AsyncMock(side_effect=NetworkError("Bad Gateway"))

    with pytest.raises(ReplyDeliveryError) as excinfo:
        await TelegramReplySender(bot).send(42, "Hello")

    assert excinfo.value.chat_id == 42
    assert "Bad Gateway" in str(excinfo.value)


@pytest.mark.asyncio
async def test_shutdown_closes_bot() -> None:
    bot = MagicMock()
    bot.shutdown = AsyncMock()

    await TelegramReplySender(bot).shutdown()

    bot.shutdown.assert_awaited_once()
