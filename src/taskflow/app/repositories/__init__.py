"""Repositories encapsulating storage access for tasks and categories."""

from __future__ import annotations

from .categories import CategoryRepository
from .counts import CategoryCountMaintainer
from .tasks import TaskRepository

__all__ = ["CategoryCountMaintainer", "CategoryRepository", "TaskRepository"]
