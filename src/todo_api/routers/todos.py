from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Request, status

from ..schemas import TodoOut
from ..services import TodoService

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)


def _get_service(request: Request) -> TodoService:
    """
    Dependency returning a service bound to the repository chosen at startup.
    """
    return TodoService(request.app.state.repository)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every todo. File storage keeps insertion order; PostgreSQL returns newest first.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"description": "Storage error"},
    },
)
def list_todos(service: TodoService = Depends(_get_service)) -> List[TodoOut]:
    """
    List all todos.
    """
    return [TodoOut(**it) for it in service.get_all_todos()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item from `{text, completed?}` and return the created resource.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Validation error"},
        500: {"description": "Storage error"},
    },
)
def create_todo(payload: Any = Body(None), service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Create a new Todo.
    """
    created = service.create_todo(payload)
    return TodoOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: str, service: TodoService = Depends(_get_service)) -> TodoOut:
    item = service.get_todo_by_id(todo_id)
    return TodoOut(**item)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Partially update a Todo: only `text` and `completed` keys present in the body change.",
    responses={
        200: {"description": "Todo updated"},
        400: {"description": "Validation error"},
        404: {"description": "Todo not found"},
    },
)
def update_todo(todo_id: str, payload: Any = Body(None), service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    updated = service.update_todo(todo_id, payload)
    return TodoOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Delete Todo",
    description="Delete a Todo item by ID and return the removed record.",
    responses={
        200: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(todo_id: str, service: TodoService = Depends(_get_service)) -> TodoOut:
    deleted = service.delete_todo(todo_id)
    return TodoOut(**deleted)  # type: ignore[arg-type]
