from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from bson import ObjectId
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .models import TaskEntity
from .repositories import Repository, StorageError
from .schemas import TaskCreate
from .utils import as_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "taskmanager"


@dataclass(frozen=True)
class _Fields:
    collection: str = "tasks"
    id: str = "_id"
    title: str = "title"
    completed: str = "completed"
    created_at: str = "createdAt"


_F = _Fields()

# Ties on createdAt (same millisecond) fall back to _id, which increases monotonically per process
_SORT = [(_F.created_at, DESCENDING), (_F.id, DESCENDING)]


class MongoRepository(Repository):
    """
    MongoDB repository implementing the Repository interface.

    Updates and deletes use find_one_and_* so each operation is atomic on the
    single document it touches.
    """

    def __init__(self, client: Any, database: str = DEFAULT_DATABASE) -> None:
        self._client = client
        self._collection: Collection = client[database][_F.collection]
        self._collection.create_index([(_F.created_at, DESCENDING)])

    @classmethod
    def connect(cls, uri: str, timeout_ms: int = 5000) -> "MongoRepository":
        """
        Open a client for uri and verify the server answers a ping.

        Raises:
            StorageError if the URI is invalid or the server cannot be reached.
        """
        client: Optional[MongoClient] = None
        try:
            client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
            client.admin.command("ping")
            database = client.get_default_database(default=DEFAULT_DATABASE).name
            repo = cls(client, database)
        except PyMongoError as e:
            if client is not None:
                client.close()
            raise StorageError(f"could not connect to MongoDB: {e}") from e
        logger.info("Connected to MongoDB database %r", database)
        return repo

    def _doc_to_entity(self, doc: Mapping[str, Any]) -> TaskEntity:
        return {
            "id": str(doc[_F.id]),
            "title": str(doc[_F.title]),
            "completed": bool(doc.get(_F.completed, False)),
            "created_at": as_utc(doc[_F.created_at]),
        }

    def create(self, data: TaskCreate) -> TaskEntity:
        doc = {
            _F.title: data.title,
            _F.completed: False,
            _F.created_at: utc_now(),
        }
        result = self._collection.insert_one(doc)
        doc[_F.id] = result.inserted_id
        return self._doc_to_entity(doc)

    def list(self) -> List[TaskEntity]:
        return [self._doc_to_entity(d) for d in self._collection.find({}).sort(_SORT)]

    def set_completed(self, task_id: str, completed: bool) -> Optional[TaskEntity]:
        doc = self._collection.find_one_and_update(
            {_F.id: ObjectId(task_id)},
            {"$set": {_F.completed: completed}},
            return_document=ReturnDocument.AFTER,
        )
        return self._doc_to_entity(doc) if doc else None

    def delete(self, task_id: str) -> bool:
        return self._collection.find_one_and_delete({_F.id: ObjectId(task_id)}) is not None

    def close(self) -> None:
        self._client.close()
        logger.info("MongoDB connection closed")
