from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a stored Todo item, shared by both
    storage backends.

    Fields:
    - id: Random UUID string assigned at creation
    - text: Trimmed text (1..200 chars, enforced by the validation layer)
    - completed: Boolean completion flag
    - created_at: UTC creation timestamp
    - updated_at: UTC last update timestamp, never earlier than created_at
    """

    id: str
    text: str
    completed: bool
    created_at: datetime
    updated_at: datetime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def touch(previous: Optional[datetime] = None) -> datetime:
    """
    Return a fresh update timestamp. When `previous` is given the result is strictly
    later than it, even on clocks too coarse to have advanced.
    """
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
