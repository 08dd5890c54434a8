from __future__ import annotations

import json
import os
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from threading import RLock
from typing import Any, Dict, List, Optional

from .errors import NotFoundError, StoreError
from .logging_config import get_logger
from .models import TodoEntity, touch, utcnow
from .schemas import TodoCreate, TodoUpdate
from .secrets_provider import SecretsProvider
from .settings import Settings

logger = get_logger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    name: str = "abstract"

    @abstractmethod
    def list_all(self) -> List[TodoEntity]:
        """Return every stored TodoEntity in the backend's natural order."""

    @abstractmethod
    def create(self, data: TodoCreate) -> TodoEntity:
        """Create and return a new TodoEntity."""

    @abstractmethod
    def update(self, todo_id: str, data: TodoUpdate) -> TodoEntity:
        """Apply the supplied fields and return the updated entity. Raises NotFoundError."""

    @abstractmethod
    def delete(self, todo_id: str) -> TodoEntity:
        """Remove a TodoEntity and return it. Raises NotFoundError."""

    def get(self, todo_id: str) -> TodoEntity:
        """
        Return a TodoEntity by id, scanning `list_all`. Raises NotFoundError.
        """
        for item in self.list_all():
            if item["id"] == todo_id:
                return item
        raise NotFoundError(todo_id)

    def close(self) -> None:
        """Release backend resources."""


def _to_document(entity: TodoEntity) -> Dict[str, Any]:
    return {
        "id": entity["id"],
        "text": entity["text"],
        "completed": entity["completed"],
        "createdAt": entity["created_at"].isoformat(),
        "updatedAt": entity["updated_at"].isoformat(),
    }


def _from_document(doc: Dict[str, Any]) -> TodoEntity:
    try:
        return {
            "id": str(doc["id"]),
            "text": str(doc["text"]),
            "completed": bool(doc.get("completed", False)),
            "created_at": _parse_timestamp(doc["createdAt"]),
            "updated_at": _parse_timestamp(doc["updatedAt"]),
        }
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise StoreError(f"Malformed todo record in data file: {e!r}") from e


def _parse_timestamp(value: str) -> datetime:
    # Older documents may carry a JavaScript-style trailing 'Z'
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class FileRepository(Repository):
    """
    JSON file repository for local development.

    The document has the shape {"todos": [...]} and keeps insertion order. Every
    operation reads the whole file; writes rewrite it completely. A per-instance
    lock serializes read-modify-write cycles inside one process; separate
    processes sharing the file are not coordinated.
    """

    name = "file"

    def __init__(self, path: str) -> None:
        self._path = path
        self._lock = RLock()
        self._ensure_file()

    @property
    def path(self) -> str:
        return self._path

    def _ensure_file(self) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._path)), exist_ok=True)
            if not os.path.exists(self._path):
                self._write([])
        except OSError as e:
            raise StoreError(f"Cannot initialize data file {self._path}: {e}") from e

    def _read(self) -> List[Dict[str, Any]]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read data file {self._path}: {e}") from e
        todos = data.get("todos") if isinstance(data, dict) else None
        if todos is None:
            return []
        if not isinstance(todos, list) or not all(isinstance(doc, dict) for doc in todos):
            raise StoreError(f"Malformed data file {self._path}: \"todos\" must be a list of objects")
        return todos

    def _write(self, todos: List[Dict[str, Any]]) -> None:
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump({"todos": todos}, f, indent=2)
        except OSError as e:
            raise StoreError(f"Cannot write data file {self._path}: {e}") from e

    @staticmethod
    def _index_of(todos: List[Dict[str, Any]], todo_id: str) -> int:
        for i, doc in enumerate(todos):
            if doc.get("id") == todo_id:
                return i
        raise NotFoundError(todo_id)

    def list_all(self) -> List[TodoEntity]:
        with self._lock:
            return [_from_document(doc) for doc in self._read()]

    def create(self, data: TodoCreate) -> TodoEntity:
        now = utcnow()
        entity: TodoEntity = {
            "id": str(uuid.uuid4()),
            "text": data.text,
            "completed": data.completed,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            todos = self._read()
            todos.append(_to_document(entity))
            self._write(todos)
        return entity

    def update(self, todo_id: str, data: TodoUpdate) -> TodoEntity:
        with self._lock:
            todos = self._read()
            index = self._index_of(todos, todo_id)

            # Shallow merge of the supplied fields only
            updated = _from_document(todos[index])
            updated.update(data.changes())  # type: ignore[typeddict-item]
            updated["updated_at"] = touch(updated["updated_at"])

            todos[index] = _to_document(updated)
            self._write(todos)
            return updated

    def delete(self, todo_id: str) -> TodoEntity:
        with self._lock:
            todos = self._read()
            index = self._index_of(todos, todo_id)
            removed = todos.pop(index)
            self._write(todos)
            return _from_document(removed)


# PUBLIC_INTERFACE
def build_repository(settings: Settings, secrets: Optional[SecretsProvider] = None) -> Repository:
    """
    Construct the repository selected by settings. Called once at startup; the
    choice holds for the lifetime of the process.
    - file: FileRepository at DATA_FILE
    - postgres: PostgresRepository using credentials from the SecretsProvider
    """
    if settings.use_postgres:
        from .db import connect_postgres

        provider = secrets or SecretsProvider(settings)
        return connect_postgres(provider.get_database_config())

    logger.info("Using JSON file database at %s", settings.data_file)
    return FileRepository(settings.data_file)
