"""Service layer encapsulating task-related operations."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..errors import NotFoundError
from ..models import Task, utcnow
from ..repositories import CategoryCountMaintainer, TaskRepository
from ..schemas import TaskCreate, TaskStatistics, TaskUpdate
from ..storage import StorageBackend
from .queries import filter_tasks, sort_tasks, task_statistics

logger = logging.getLogger(__name__)


def _task_not_found(task_id: int) -> NotFoundError:
    return NotFoundError(
        "Task not found.",
        description=f"Task {task_id} does not exist.",
        details={"task_id": task_id},
    )


class TaskService:
    """High-level business orchestration for ``Task`` entities."""

    def __init__(
        self,
        storage: StorageBackend,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._counts = CategoryCountMaintainer(storage)
        self._repository = TaskRepository(storage, counts=self._counts, clock=clock)

    @property
    def repository(self) -> TaskRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def create_task(self, payload: TaskCreate) -> Task:
        """Create a task and refresh its category count."""
        async with self._storage.lock:
            task = await self._repository.create(payload)
        logger.info(
            "Task created",
            extra={"task_id": task.id, "category": task.category, "status": task.status.value},
        )
        return task

    async def get_task(self, task_id: int) -> Task:
        task = await self._repository.get(task_id)
        if task is None:
            raise _task_not_found(task_id)
        return task

    async def list_tasks(
        self,
        *,
        status: str | None = None,
        category: str | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> list[Task]:
        """Return tasks in storage order, optionally filtered and sorted."""
        tasks = await self._repository.list()
        if status or category or search:
            tasks = filter_tasks(tasks, status=status, category=category, search=search)
        if sort:
            tasks = sort_tasks(tasks, sort)
        return tasks

    async def update_task(self, task_id: int, payload: TaskUpdate) -> Task:
        """Apply a partial update; only fields present in ``payload`` change."""
        changes = payload.changes()
        async with self._storage.lock:
            task = await self._repository.update(task_id, changes)
        if task is None:
            raise _task_not_found(task_id)
        logger.info("Task updated", extra={"task_id": task_id, "fields": sorted(changes)})
        return task

    async def delete_task(self, task_id: int) -> bool:
        """Delete a task by ID, returning ``True`` iff a record was removed."""
        async with self._storage.lock:
            removed = await self._repository.delete(task_id)
        if removed:
            logger.info("Task deleted", extra={"task_id": task_id})
        return removed

    async def clear_completed(self) -> int:
        async with self._storage.lock:
            removed = await self._repository.delete_completed()
        logger.info("Completed tasks cleared", extra={"removed": removed})
        return removed

    async def statistics(self, now: datetime | None = None) -> TaskStatistics:
        tasks = await self._repository.list()
        return task_statistics(tasks, now or self._clock())

    async def resync_counts(self) -> None:
        """Recompute every category count from the stored tasks."""
        async with self._storage.lock:
            await self._counts.recompute_all()


__all__ = ["TaskService"]
