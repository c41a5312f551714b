from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new task.

    Only the title is accepted; completed, createdAt and id are always assigned
    by the server and any such fields in the payload are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"title": "Buy milk"}},
    )

    title: StrictStr = Field(..., description="Title of the task", min_length=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and reject blank titles.
        """
        s = v.strip()
        if not s:
            raise ValueError("title must not be empty")
        return s


# PUBLIC_INTERFACE
class TaskToggle(BaseModel):
    """
    Schema for setting a task's completion flag.
    The title is immutable; if supplied it is ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"completed": True}},
    )

    completed: StrictBool = Field(..., description="New completion status flag")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "66f1c0a2e4b0a1b2c3d4e5f6",
                "title": "Buy milk",
                "completed": False,
                "createdAt": "2025-01-25T10:15:30.123000Z",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Title of the task")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp (UTC)")


class HealthOut(BaseModel):
    status: str = Field(..., description="Status token, 'OK' when the service is up")
    timestamp: datetime = Field(..., description="Current server time (UTC)")


class ErrorOut(BaseModel):
    error: str = Field(..., description="Human readable error message")
