"""Conversation turn models for the chat log and the completion prompt."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class MessageRole(str, Enum):
    """Message sender role."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One entry of the prompt sent to the completion service."""

    role: MessageRole
    content: str


class NewTurn(BaseModel):
    """A turn about to be appended to the conversation log."""

    sender_id: str
    text: str
    role: MessageRole
    session_id: str


class ConversationTurn(NewTurn):
    """Persisted turn; id and timestamp are assigned by the store."""

    id: str
    created_at: datetime

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.text)
