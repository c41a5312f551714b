from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, List, Optional, Tuple

from .models import TaskEntity
from .schemas import TaskCreate
from .settings import Settings
from .utils import new_task_id, utc_now

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage backend is unreachable or fails unexpectedly."""


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract repository contract for task storage backends.

    Identifiers passed in are expected to be well-formed; callers validate them
    first. Backends raise StorageError (or their driver's own error type) on
    failure and never for a missing record.
    """

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskEntity:
        """Persist a new task with completed=False and a fresh timestamp, and return it."""

    @abstractmethod
    def list(self) -> List[TaskEntity]:
        """Return every task ordered by created_at descending (newest first)."""

    @abstractmethod
    def set_completed(self, task_id: str, completed: bool) -> Optional[TaskEntity]:
        """Overwrite the completed flag. Return the updated task, or None if not found."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""

    def close(self) -> None:
        """Release any resources held by the backend."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and running without a database.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        # id -> (insertion sequence, entity); the sequence breaks created_at ties
        self._items: Dict[str, Tuple[int, TaskEntity]] = {}
        self._seq = 0

    def create(self, data: TaskCreate) -> TaskEntity:
        entity: TaskEntity = {
            "id": new_task_id(),
            "title": data.title,
            "completed": False,
            "created_at": utc_now(),
        }
        with self._lock:
            self._seq += 1
            self._items[entity["id"]] = (self._seq, entity)
        return entity.copy()  # type: ignore[return-value]

    def list(self) -> List[TaskEntity]:
        with self._lock:
            rows = sorted(
                self._items.values(),
                key=lambda row: (row[1]["created_at"], row[0]),
                reverse=True,
            )
            return [entity.copy() for _, entity in rows]  # type: ignore[misc]

    def set_completed(self, task_id: str, completed: bool) -> Optional[TaskEntity]:
        with self._lock:
            row = self._items.get(task_id)
            if row is None:
                return None
            seq, existing = row
            updated = existing.copy()
            updated["completed"] = completed
            self._items[task_id] = (seq, updated)  # type: ignore[assignment]
            return updated.copy()  # type: ignore[return-value]

    def delete(self, task_id: str) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None


# PUBLIC_INTERFACE
def get_repository(settings: Settings) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - mongo: MongoRepository, connected and verified (raises StorageError when unreachable)
    - memory: InMemoryRepository
    """
    if settings.persistence_backend == "memory":
        logger.info("Using in-memory task storage")
        return InMemoryRepository()

    from .db import MongoRepository

    return MongoRepository.connect(settings.mongodb_uri, timeout_ms=settings.mongodb_timeout_ms)
