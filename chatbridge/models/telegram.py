"""Telegram webhook payload models.

Only the fields the bridge acts on are modelled; everything else in the
``Update`` object is ignored.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TelegramChat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str


class TelegramSender(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str
    username: Optional[str] = None


class TelegramMessage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    chat: TelegramChat
    sender: TelegramSender = Field(alias="from")
    text: str = Field(min_length=1)


class TelegramUpdate(BaseModel):
    """The subset of a Telegram ``Update`` carrying a text message."""

    model_config = ConfigDict(extra="ignore")

    update_id: Optional[int | str] = None
    message: TelegramMessage


class InboundMessage(BaseModel):
    """Normalised, actionable text message."""

    chat_id: int | str
    sender_id: str
    username: str = ""
    text: str

    @classmethod
    def from_update(cls, update: TelegramUpdate) -> "InboundMessage":
        message = update.message
        return cls(
            chat_id=message.chat.id,
            sender_id=str(message.sender.id),
            username=message.sender.username or "",
            text=message.text,
        )
