"""
Input validation for todo payloads.

Rules run in a fixed order and the first failure wins. Both functions are pure:
they never touch storage and return normalized schema objects for the
repositories to persist.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from .errors import ValidationError
from .schemas import TodoCreate, TodoUpdate

MAX_TEXT_LENGTH = 200


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValidationError("InvalidBody", "Request body must be a JSON object")
    return payload


def _normalize_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("TypeError", "Todo text must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError("EmptyText", "Todo text cannot be empty")
    # Length is checked against the untrimmed input
    if len(value) > MAX_TEXT_LENGTH:
        raise ValidationError("TooLong", f"Todo text cannot exceed {MAX_TEXT_LENGTH} characters")
    return trimmed


# PUBLIC_INTERFACE
def validate_create(payload: Any) -> TodoCreate:
    """
    Validate a create payload `{text, completed?}`.

    Raises:
        ValidationError: MissingField when text is absent, null or "",
            TypeError when it is not a string, EmptyText when only whitespace,
            TooLong when longer than 200 characters.
    """
    data = _require_mapping(payload)
    text = data.get("text")
    if text is None or text == "":
        raise ValidationError("MissingField", "Todo text is required and must be a string")
    return TodoCreate(text=_normalize_text(text), completed=bool(data.get("completed")))


# PUBLIC_INTERFACE
def validate_update(todo_id: Optional[str], payload: Any) -> TodoUpdate:
    """
    Validate a partial update. Only keys present in the payload are carried
    into the result; `completed` is coerced by truthiness, `text` passes the
    same checks as on create.
    """
    if not todo_id:
        raise ValidationError("MissingId", "Todo ID is required")
    data = _require_mapping(payload)

    fields = {}
    if "text" in data:
        fields["text"] = _normalize_text(data["text"])
    if "completed" in data:
        fields["completed"] = bool(data["completed"])
    return TodoUpdate(**fields)
