"""Task domain models."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from .common import CamelModel


class TaskStatus(str, Enum):
    """Enumeration of possible task states."""

    ACTIVE = "active"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Enumeration of task priorities."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(CamelModel):
    """A stored task.

    ``category`` names a :class:`~taskflow.app.models.category.Category` by its
    ``name``; the reference is not enforced, so it may point at nothing.
    """

    id: int
    title: str
    description: str | None = None
    category: str
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.ACTIVE
    due_date: str | None = None
    created_at: str
    completed_at: str | None = None
    order: int = Field(default=0)


__all__ = ["Task", "TaskPriority", "TaskStatus"]
