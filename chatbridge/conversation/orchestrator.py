"""Conversation turn orchestration.

One inbound message runs through a fixed sequence::

    quota check -> store user turn -> increment usage -> fetch history
        -> completion -> store assistant turn -> reply

Every step is awaited in order and attempted exactly once. Any failure after
validation is caught once, here, and answered with a generic notice so the
webhook caller always sees a successful delivery.
"""

from __future__ import annotations

import logging
from enum import Enum

from chatbridge.agent.completion import CompletionClient
from chatbridge.conversation.context import assemble_context
from chatbridge.conversation.policy import DailySessionPolicy, QuotaPolicy
from chatbridge.memory.base import ConversationLog, UserStore
from chatbridge.models.messages import MessageRole, NewTurn
from chatbridge.models.telegram import InboundMessage
from chatbridge.models.users import User
from chatbridge.telegram.sender import ReplySender

logger = logging.getLogger(__name__)

LIMIT_MESSAGE_TEMPLATE = "You have reached the usage limit of {limit} messages."
DEFAULT_ERROR_MESSAGE = "An error occurred. Please try again later."


class TurnOutcome(str, Enum):
    """How a single inbound message was resolved."""

    REPLIED = "replied"
    QUOTA_EXCEEDED = "quota_exceeded"
    FAILED = "failed"


class TurnOrchestrator:
    """Drives one request lifecycle from validated message to reply."""

    def __init__(
        self,
        users: UserStore,
        turns: ConversationLog,
        completion: CompletionClient,
        sender: ReplySender,
        *,
        quota: QuotaPolicy | None = None,
        sessions: DailySessionPolicy | None = None,
        history_limit: int = 10,
        limit_message: str | None = None,
        error_message: str = DEFAULT_ERROR_MESSAGE,
    ) -> None:
        self.users = users
        self.turns = turns
        self.completion = completion
        self.sender = sender
        self.quota = quota or QuotaPolicy()
        self.sessions = sessions or DailySessionPolicy()
        self.history_limit = history_limit
        self.limit_message = limit_message or LIMIT_MESSAGE_TEMPLATE.format(
            limit=self.quota.limit
        )
        self.error_message = error_message

    async def handle(self, message: InboundMessage) -> TurnOutcome:
        """Process ``message``. Never raises."""
        session_id = self.sessions.current()
        logger.info(
            "Processing message from sender %s in chat %s (session %s)",
            message.sender_id,
            message.chat_id,
            session_id,
        )

        try:
            return await self._run(message, session_id)
        except Exception:
            logger.exception(
                "Error processing message from sender %s in chat %s",
                message.sender_id,
                message.chat_id,
            )
            await self._notify_failure(message.chat_id)
            return TurnOutcome.FAILED

    async def _run(self, message: InboundMessage, session_id: str) -> TurnOutcome:
        user = await self._get_or_create_user(message)

        if self.quota.is_exhausted(user.usage_count):
            logger.info(
                "Sender %s reached the usage limit (%d/%d)",
                message.sender_id,
                user.usage_count,
                self.quota.limit,
            )
            await self.sender.send(message.chat_id, self.limit_message)
            return TurnOutcome.QUOTA_EXCEEDED

        await self.turns.append(
            NewTurn(
                sender_id=message.sender_id,
                text=message.text,
                role=MessageRole.USER,
                session_id=session_id,
            )
        )

        # Read-then-write: concurrent requests from one sender may race here.
        await self.users.update_usage(message.sender_id, user.usage_count + 1)

        recent = await self.turns.recent(
            message.sender_id, session_id, limit=self.history_limit
        )
        # The stored user turn is part of `recent`; the inbound text is appended again.
        context = assemble_context(list(reversed(recent)), message.text)

        reply = await self.completion.complete(context)

        await self.turns.append(
            NewTurn(
                sender_id=message.sender_id,
                text=reply,
                role=MessageRole.ASSISTANT,
                session_id=session_id,
            )
        )

        await self.sender.send(message.chat_id, reply)
        return TurnOutcome.REPLIED

    async def _get_or_create_user(self, message: InboundMessage) -> User:
        user = await self.users.get(message.sender_id)
        if user is None:
            user = await self.users.create(message.sender_id, message.username)
        return user

    async def _notify_failure(self, chat_id: int | str) -> None:
        try:
            await self.sender.send(chat_id, self.error_message)
        except Exception:
            logger.exception("Failed to deliver error notice to chat %s", chat_id)
