"""Task-related Pydantic schemas."""

from __future__ import annotations

from pydantic import ConfigDict, Field, field_validator, model_validator

from ..models import CamelModel, Task, TaskPriority, TaskStatus

TASK_READ_EXAMPLE = {
    "id": 1,
    "title": "Buy milk",
    "description": "Two litres, semi-skimmed.",
    "category": "Shopping",
    "priority": TaskPriority.MEDIUM.value,
    "status": TaskStatus.ACTIVE.value,
    "dueDate": "2024-03-05T00:00:00.000Z",
    "createdAt": "2024-03-01T09:30:00.000Z",
    "completedAt": None,
    "order": 0,
}

TASK_STATISTICS_EXAMPLE = {
    "total": 4,
    "completed": 1,
    "active": 3,
    "overdue": 1,
    "completionRate": 25,
}

_REQUIRED_ON_UPDATE = ("title", "category", "priority", "status")


class TaskCreate(CamelModel):
    """Payload for creating a new task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "Two litres, semi-skimmed.",
                "category": "Shopping",
                "priority": TaskPriority.MEDIUM.value,
                "dueDate": "2024-03-05",
            }
        }
    )

    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None)
    category: str = Field(min_length=1)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    status: TaskStatus = Field(default=TaskStatus.ACTIVE)
    due_date: str | None = Field(default=None)


class TaskUpdate(CamelModel):
    """Payload for partially updating an existing task.

    Only fields present in the payload are applied. ``description`` and
    ``dueDate`` may be sent as ``null`` to clear them.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": TaskStatus.COMPLETED.value,
            }
        }
    )

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None)
    category: str | None = Field(default=None, min_length=1)
    priority: TaskPriority | None = Field(default=None)
    status: TaskStatus | None = Field(default=None)
    due_date: str | None = Field(default=None)

    @field_validator(*_REQUIRED_ON_UPDATE)
    @classmethod
    def _reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field cannot be null.")
        return value

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "TaskUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        return self

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller explicitly supplied."""
        return self.model_dump(exclude_unset=True)


class TaskRead(Task):
    """Public representation of a task."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )


class TaskStatistics(CamelModel):
    """Aggregate counters over the task collection."""

    model_config = ConfigDict(json_schema_extra={"example": TASK_STATISTICS_EXAMPLE})

    total: int = Field(ge=0)
    completed: int = Field(ge=0)
    active: int = Field(ge=0)
    overdue: int = Field(ge=0)
    completion_rate: int = Field(ge=0, le=100)


class ClearCompletedResponse(CamelModel):
    """Result of removing every completed task."""

    removed: int = Field(ge=0)


__all__ = [
    "ClearCompletedResponse",
    "TaskCreate",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
]
