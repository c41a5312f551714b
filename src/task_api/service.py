"""
Task operations expressed as explicit outcomes.

Each TaskService method returns one of Ok, Invalid, NotFound or Failed instead
of raising, so the HTTP layer can map every result to a status code in one place.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union

from pymongo.errors import PyMongoError

from .models import TaskEntity
from .repositories import Repository, StorageError
from .schemas import TaskCreate, TaskToggle
from .utils import is_valid_task_id, normalize_task_id

logger = logging.getLogger(__name__)

T = TypeVar("T")

TASK_NOT_FOUND = "Task not found"
INVALID_TASK_ID = "Invalid task id"
INTERNAL_ERROR = "Internal server error"

# Errors treated as internal failures rather than propagated
_STORAGE_ERRORS = (StorageError, PyMongoError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    message: str


@dataclass(frozen=True)
class NotFound:
    message: str = TASK_NOT_FOUND


@dataclass(frozen=True)
class Failed:
    message: str = INTERNAL_ERROR


Outcome = Union[Ok[T], Invalid, NotFound, Failed]


# PUBLIC_INTERFACE
class TaskService:
    """Task use cases on top of a Repository."""

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def list_tasks(self) -> "Outcome[List[TaskEntity]]":
        try:
            return Ok(self._repo.list())
        except _STORAGE_ERRORS:
            logger.exception("Error fetching tasks")
            return Failed()

    def create_task(self, data: TaskCreate) -> "Outcome[TaskEntity]":
        try:
            created = self._repo.create(data)
        except _STORAGE_ERRORS:
            logger.exception("Error creating task")
            return Failed()
        logger.debug("Created task %s", created["id"])
        return Ok(created)

    def set_completed(self, task_id: str, data: TaskToggle) -> "Outcome[TaskEntity]":
        if not is_valid_task_id(task_id):
            return Invalid(INVALID_TASK_ID)
        task_id = normalize_task_id(task_id)
        try:
            updated: Optional[TaskEntity] = self._repo.set_completed(task_id, data.completed)
        except _STORAGE_ERRORS:
            logger.exception("Error updating task %s", task_id)
            return Failed()
        if updated is None:
            return NotFound()
        logger.debug("Task %s completed=%s", task_id, updated["completed"])
        return Ok(updated)

    def delete_task(self, task_id: str) -> "Outcome[None]":
        if not is_valid_task_id(task_id):
            return Invalid(INVALID_TASK_ID)
        task_id = normalize_task_id(task_id)
        try:
            deleted = self._repo.delete(task_id)
        except _STORAGE_ERRORS:
            logger.exception("Error deleting task %s", task_id)
            return Failed()
        if not deleted:
            return NotFound()
        logger.debug("Deleted task %s", task_id)
        return Ok(None)
