"""MongoDB conversation log: one document per turn.

Document schema::

    {
        "_id": ObjectId("..."),
        "telegram_id": "123456789",
        "message": "Hello!",
        "role": "user",
        "session_id": "2024-01-01",
        "created_at": ISODate("2024-01-01T10:30:00Z")
    }

Turns are never updated; a session's context is read back with a single
indexed query on ``(telegram_id, session_id, created_at)``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING

from chatbridge.memory.base import ConversationLog
from chatbridge.models.messages import ConversationTurn, MessageRole, NewTurn

logger = logging.getLogger(__name__)


def _doc_to_turn(doc: dict[str, Any]) -> ConversationTurn:
    return ConversationTurn(
        id=str(doc["_id"]),
        sender_id=doc["telegram_id"],
        text=doc["message"],
        role=MessageRole(doc["role"]),
        session_id=doc["session_id"],
        created_at=doc["created_at"],
    )


class MongoChatStore(ConversationLog):
    """Conversation turns stored in a MongoDB collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    async def ensure_indexes(self) -> None:
        await self._collection.create_index(
            [
                ("telegram_id", ASCENDING),
                ("session_id", ASCENDING),
                ("created_at", DESCENDING),
            ],
            name="session_history",
        )

    async def append(self, turn: NewTurn) -> ConversationTurn:
        doc = {
            "telegram_id": turn.sender_id,
            "message": turn.text,
            "role": turn.role.value,
            "session_id": turn.session_id,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.debug(
            "Stored %s turn %s for %s", turn.role.value, result.inserted_id, turn.sender_id
        )
        return _doc_to_turn(doc)

    async def recent(
        self, sender_id: str, session_id: str, limit: int = 10
    ) -> list[ConversationTurn]:
        cursor = (
            self._collection.find({"telegram_id": sender_id, "session_id": session_id})
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            .limit(limit)
        )
        return [_doc_to_turn(doc) async for doc in cursor]
