from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    Storage-agnostic representation of a task as handed out by repositories.

    Fields:
    - id: 24-character hex ObjectId string, assigned by storage
    - title: Non-empty title (trimmed on input via schemas), immutable
    - completed: Boolean completion flag, the only mutable field
    - created_at: UTC creation timestamp with millisecond precision
    """

    id: str
    title: str
    completed: bool
    created_at: datetime
