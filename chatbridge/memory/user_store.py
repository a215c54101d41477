"""MongoDB user store: one document per Telegram user.

Document schema::

    {
        "_id": "123456789",
        "telegram_id": "123456789",
        "username": "alice",
        "usage_count": 3,
        "created_at": ISODate("2024-01-01T10:30:00Z"),
        "updated_at": ISODate("2024-01-01T11:00:00Z")
    }
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from chatbridge.exceptions import StoreError
from chatbridge.memory.base import UserStore
from chatbridge.models.users import User

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _doc_to_user(doc: dict[str, Any]) -> User:
    return User(
        sender_id=str(doc["_id"]),
        username=doc.get("username") or "",
        usage_count=doc.get("usage_count", 0),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class MongoUserStore(UserStore):
    """Usage counters stored in a MongoDB collection keyed by sender id."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self._collection = collection

    async def get(self, sender_id: str) -> Optional[User]:
        doc = await self._collection.find_one({"_id": sender_id})
        if doc is None:
            return None
        return _doc_to_user(doc)

    async def create(self, sender_id: str, username: str = "") -> User:
        now = _now()
        doc = {
            "_id": sender_id,
            "telegram_id": sender_id,
            "username": username,
            "usage_count": 0,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError:
            # A concurrent request created the user first.
            existing = await self.get(sender_id)
            if existing is None:
                raise
            return existing

        logger.info("Created new user: %s", sender_id)
        return _doc_to_user(doc)

    async def update_usage(self, sender_id: str, usage_count: int) -> User:
        doc = await self._collection.find_one_and_update(
            {"_id": sender_id},
            {"$set": {"usage_count": usage_count, "updated_at": _now()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise StoreError(f"User {sender_id} not found")
        return _doc_to_user(doc)
