"""Quota and session policies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def session_key(now: datetime) -> str:
    """Return the session id for ``now``: its calendar date in UTC.

    Naive datetimes are taken to already be in UTC.
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date().isoformat()


class DailySessionPolicy:
    """Starts a fresh conversation window at every UTC midnight."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock

    def current(self) -> str:
        return session_key(self._clock())


@dataclass(frozen=True)
class QuotaPolicy:
    """Fixed per-user cap on accepted messages.

    The cap is checked against the counter as read before the increment, so
    concurrent requests from one user may each pass the check.
    """

    limit: int = 5

    def is_exhausted(self, usage_count: int) -> bool:
        return usage_count >= self.limit
