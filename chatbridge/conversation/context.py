"""Prompt assembly from stored history."""

from __future__ import annotations

from typing import Iterable

from chatbridge.models.messages import ChatMessage, ConversationTurn, MessageRole


def assemble_context(
    history: Iterable[ConversationTurn], new_message: str
) -> list[ChatMessage]:
    """Build the completion prompt.

    ``history`` must already be in chronological order (oldest first). Roles
    are passed through unchanged and the new message is always last.
    """
    messages = [turn.to_chat_message() for turn in history]
    messages.append(ChatMessage(role=MessageRole.USER, content=new_message))
    return messages
