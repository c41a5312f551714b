from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """
    Return the current UTC time truncated to milliseconds.

    MongoDB stores datetimes with millisecond precision, so truncating up front
    keeps the value returned on create identical to the one read back later.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


# PUBLIC_INTERFACE
def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from storage."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# PUBLIC_INTERFACE
def is_valid_task_id(value: str) -> bool:
    """Return True if value is a well-formed task identifier (24-char hex ObjectId)."""
    return ObjectId.is_valid(value) and len(value) == 24


# PUBLIC_INTERFACE
def new_task_id() -> str:
    return str(ObjectId())


# PUBLIC_INTERFACE
def normalize_task_id(value: str) -> str:
    """Return the canonical lowercase form of a well-formed task id."""
    return str(ObjectId(value))
