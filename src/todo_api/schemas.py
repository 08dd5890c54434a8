from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Normalized input for creating a Todo, produced by `validation.validate_create`.
    """

    text: str = Field(..., description="Trimmed todo text", min_length=1, max_length=200)
    completed: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Normalized partial update produced by `validation.validate_update`.
    Only the fields in `model_fields_set` are applied by the repositories.
    """

    text: Optional[str] = Field(default=None, description="Trimmed todo text", min_length=1, max_length=200)
    completed: Optional[bool] = Field(default=None, description="Completion status flag")

    def changes(self) -> dict:
        """Return only the fields that were supplied."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item. Serialized with camelCase keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f2c1a0e-5b7d-4c2e-9a51-7d0c6f1e2b44",
                "text": "Buy groceries",
                "completed": False,
                "createdAt": "2025-01-25T10:15:30.123456Z",
                "updatedAt": "2025-01-26T09:00:00.000001Z",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    text: str = Field(..., description="Todo text")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


# PUBLIC_INTERFACE
class HealthOut(BaseModel):
    """Payload of the health endpoint."""

    status: str = Field(..., description="Always 'OK' while the process serves requests")
    timestamp: datetime = Field(..., description="Server time of the check")
    environment: str = Field(..., description="Runtime environment name")
    backend: str = Field(..., description="Active storage backend: 'file' or 'postgres'")
