"""Todo business logic: validate input, then hand it to the repository."""
from __future__ import annotations

from typing import Any, List

from .errors import TodoError, ValidationError
from .logging_config import get_logger
from .models import TodoEntity
from .repositories import Repository
from .validation import validate_create, validate_update

logger = get_logger(__name__)


class TodoService:
    """Todo operations on top of a repository."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def get_all_todos(self) -> List[TodoEntity]:
        logger.info("Fetching all todos")
        try:
            todos = self.repository.list_all()
        except TodoError as e:
            logger.error("Error fetching todos: %s", e)
            raise
        logger.info("Retrieved %d todos", len(todos))
        return todos

    def get_todo_by_id(self, todo_id: str) -> TodoEntity:
        if not todo_id:
            raise ValidationError("MissingId", "Todo ID is required")
        try:
            return self.repository.get(todo_id)
        except TodoError as e:
            logger.error("Error fetching todo by ID %s: %s", todo_id, e)
            raise

    def create_todo(self, payload: Any) -> TodoEntity:
        try:
            data = validate_create(payload)
            logger.info("Creating new todo: %r", data.text)
            todo = self.repository.create(data)
        except TodoError as e:
            logger.error("Error creating todo: %s", e)
            raise
        logger.info("Todo created successfully: %s", todo["id"])
        return todo

    def update_todo(self, todo_id: str, payload: Any) -> TodoEntity:
        try:
            data = validate_update(todo_id, payload)
            logger.info("Updating todo %s: %s", todo_id, data.changes())
            todo = self.repository.update(todo_id, data)
        except TodoError as e:
            logger.error("Error updating todo %s: %s", todo_id, e)
            raise
        logger.info("Todo updated successfully: %s", todo["id"])
        return todo

    def delete_todo(self, todo_id: str) -> TodoEntity:
        if not todo_id:
            raise ValidationError("MissingId", "Todo ID is required")
        logger.info("Deleting todo: %s", todo_id)
        try:
            todo = self.repository.delete(todo_id)
        except TodoError as e:
            logger.error("Error deleting todo %s: %s", todo_id, e)
            raise
        logger.info("Todo deleted successfully: %s", todo["id"])
        return todo
