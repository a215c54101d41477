"""Store contracts used by the turn orchestrator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from chatbridge.models.messages import ConversationTurn, NewTurn
from chatbridge.models.users import User


class UserStore(ABC):
    """Per-user usage counters keyed by sender id."""

    @abstractmethod
    async def get(self, sender_id: str) -> Optional[User]:
        """Return the user, or ``None`` if it has never been seen."""

    @abstractmethod
    async def create(self, sender_id: str, username: str = "") -> User:
        """Create a user with a zero usage counter."""

    @abstractmethod
    async def update_usage(self, sender_id: str, usage_count: int) -> User:
        """Overwrite the usage counter and return the updated user."""


class ConversationLog(ABC):
    """Append-only log of conversation turns."""

    @abstractmethod
    async def append(self, turn: NewTurn) -> ConversationTurn:
        """Persist a turn; the store assigns its id and creation time."""

    @abstractmethod
    async def recent(
        self, sender_id: str, session_id: str, limit: int = 10
    ) -> list[ConversationTurn]:
        """Return up to ``limit`` turns of one session, newest first."""
