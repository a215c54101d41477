"""User record model used for quota accounting."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """A chat user keyed by their Telegram sender id."""

    sender_id: str
    username: str = ""
    usage_count: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
