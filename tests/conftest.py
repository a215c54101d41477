"""Shared test fixtures for the chat bridge."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Optional, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from chatbridge.agent.completion import CompletionClient
from chatbridge.conversation.orchestrator import TurnOrchestrator
from chatbridge.conversation.policy import DailySessionPolicy, QuotaPolicy
from chatbridge.dependencies import get_orchestrator
from chatbridge.exceptions import CompletionError, ReplyDeliveryError
from chatbridge.main import app
from chatbridge.memory.base import ConversationLog, UserStore
from chatbridge.models.messages import ChatMessage, ConversationTurn, NewTurn
from chatbridge.models.users import User
from chatbridge.telegram.sender import ReplySender

FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryUserStore(UserStore):
    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.created: list[str] = []
        self.updates: list[tuple[str, int]] = []

    def seed(self, sender_id: str, usage_count: int, username: str = "") -> None:
        self.users[sender_id] = User(
            sender_id=sender_id, username=username, usage_count=usage_count
        )

    async def get(self, sender_id: str) -> Optional[User]:
        return self.users.get(sender_id)

    async def create(self, sender_id: str, username: str = "") -> User:
        user = User(sender_id=sender_id, username=username, usage_count=0)
        self.users[sender_id] = user
        self.created.append(sender_id)
        return user

    async def update_usage(self, sender_id: str, usage_count: int) -> User:
        user = self.users[sender_id].model_copy(update={"usage_count": usage_count})
        self.users[sender_id] = user
        self.updates.append((sender_id, usage_count))
        return user


class InMemoryConversationLog(ConversationLog):
    """Turns get strictly increasing timestamps in insertion order."""

    def __init__(self) -> None:
        self.turns: list[ConversationTurn] = []
        self._ids = count(1)
        self._clock = FIXED_NOW - timedelta(hours=1)

    def seed(self, turn: NewTurn) -> ConversationTurn:
        self._clock += timedelta(seconds=1)
        stored = ConversationTurn(
            id=str(next(self._ids)), created_at=self._clock, **turn.model_dump()
        )
        self.turns.append(stored)
        return stored

    async def append(self, turn: NewTurn) -> ConversationTurn:
        return self.seed(turn)

    async def recent(
        self, sender_id: str, session_id: str, limit: int = 10
    ) -> list[ConversationTurn]:
        matching = [
            t for t in self.turns if t.sender_id == sender_id and t.session_id == session_id
        ]
        matching.sort(key=lambda t: t.created_at, reverse=True)
        return matching[:limit]


class FakeCompletionClient(CompletionClient):
    def __init__(self, reply: str = "Hi there!") -> None:
        self.reply = reply
        self.error: Optional[Exception] = None
        self.calls: list[list[ChatMessage]] = []

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingSender(ReplySender):
    def __init__(self) -> None:
        self.sent: list[tuple[int | str, str]] = []
        self.fail_on: set[str] = set()
        self.fail_all = False

    async def send(self, chat_id: int | str, text: str) -> None:
        if self.fail_all or text in self.fail_on:
            raise ReplyDeliveryError("Failed to send Telegram message: Bad Gateway", chat_id)
        self.sent.append((chat_id, text))


@pytest.fixture
def users() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def turns() -> InMemoryConversationLog:
    return InMemoryConversationLog()


@pytest.fixture
def completion() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def failing_completion(completion: FakeCompletionClient) -> FakeCompletionClient:
    completion.error = CompletionError("OpenRouter API error: Unknown error", status_code=502)
    return completion


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def orchestrator(
    users: InMemoryUserStore,
    turns: InMemoryConversationLog,
    completion: FakeCompletionClient,
    sender: RecordingSender,
) -> TurnOrchestrator:
    return TurnOrchestrator(
        users=users,
        turns=turns,
        completion=completion,
        sender=sender,
        quota=QuotaPolicy(limit=5),
        sessions=DailySessionPolicy(clock=lambda: FIXED_NOW),
        history_limit=10,
    )


@pytest_asyncio.fixture
async def client(orchestrator: TurnOrchestrator) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def make_update(
    text: Optional[str] = "Hello",
    chat_id: int = 42,
    sender_id: int = 123,
    username: Optional[str] = "alice",
) -> dict:
    sender: dict = {"id": sender_id, "is_bot": False, "first_name": "Alice"}
    if username is not None:
        sender["username"] = username
    message: dict = {
        "message_id": 7,
        "date": 1704110400,
        "chat": {"id": chat_id, "type": "private"},
        "from": sender,
    }
    if text is not None:
        message["text"] = text
    return {"update_id": 1000, "message": message}


@pytest.fixture
def update_factory():
    return make_update
