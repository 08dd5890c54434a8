from __future__ import annotations

from typing import Optional


class TodoError(Exception):
    """Base class for errors surfaced by the todo service."""

    status_code = 500
    kind = "TodoError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# PUBLIC_INTERFACE
class ValidationError(TodoError):
    """
    Raised when input fails validation, before any persistence call.

    `code` names the failed rule: MissingField, TypeError, EmptyText, TooLong,
    MissingId or InvalidBody.
    """

    status_code = 400
    kind = "ValidationError"

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


# PUBLIC_INTERFACE
class NotFoundError(TodoError):
    """Raised when no todo exists with the requested id."""

    status_code = 404
    kind = "NotFound"

    def __init__(self, todo_id: Optional[str] = None) -> None:
        super().__init__("Todo not found")
        self.todo_id = todo_id


# PUBLIC_INTERFACE
class StoreError(TodoError):
    """Raised when the storage backend fails (I/O, decoding or database errors)."""

    status_code = 500
    kind = "StoreError"
