"""Repository encapsulating task persistence and its side effects."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from ..models import Task, TaskStatus, to_iso, utcnow
from ..schemas import TaskCreate
from ..storage import StorageBackend
from .counts import CategoryCountMaintainer

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = frozenset({"title", "description", "category", "priority", "status", "due_date"})


class TaskRepository:
    """Create, update, delete and list tasks over a storage backend.

    Callers are expected to hold ``storage.lock`` around mutating calls.
    """

    def __init__(
        self,
        storage: StorageBackend,
        *,
        counts: CategoryCountMaintainer | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._counts = counts or CategoryCountMaintainer(storage)
        self._clock = clock

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    async def list(self) -> list[Task]:
        """Return tasks ascending by ``order``, ties broken by id."""
        tasks = await self._storage.load_tasks()
        return sorted(tasks, key=lambda task: (task.order, task.id))

    async def get(self, task_id: int) -> Task | None:
        tasks = await self._storage.load_tasks()
        return next((task for task in tasks if task.id == task_id), None)

    async def create(self, payload: TaskCreate) -> Task:
        """Persist a new task and refresh its category count.

        ``order`` is the collection size before insertion and is never
        renumbered afterwards.
        """
        tasks = await self._storage.load_tasks()
        task_id = await self._storage.next_id("tasks")
        now = to_iso(self._clock())
        task = Task(
            id=task_id,
            title=payload.title,
            description=payload.description,
            category=payload.category,
            priority=payload.priority,
            status=payload.status,
            due_date=payload.due_date,
            created_at=now,
            completed_at=now if payload.status == TaskStatus.COMPLETED else None,
            order=len(tasks),
        )
        tasks.append(task)
        await self._storage.save_tasks(tasks)
        await self._counts.recompute(task.category)
        logger.debug("Task stored", extra={"task_id": task.id, "order": task.order})
        return task

    async def update(self, task_id: int, changes: Mapping[str, Any]) -> Task | None:
        """Merge ``changes`` into a task, returning ``None`` if it does not exist.

        A ``status`` change stamps ``completed_at`` when completing and clears
        it when reactivating; without one ``completed_at`` is left alone.
        """
        tasks = await self._storage.load_tasks()
        index = next((i for i, task in enumerate(tasks) if task.id == task_id), None)
        if index is None:
            return None

        current = tasks[index]
        applied = {key: value for key, value in changes.items() if key in _MUTABLE_FIELDS}
        if "status" in applied:
            status = TaskStatus(applied["status"])
            applied["status"] = status
            applied["completed_at"] = to_iso(self._clock()) if status == TaskStatus.COMPLETED else None
        updated = current.model_copy(update=applied)
        tasks[index] = updated
        await self._storage.save_tasks(tasks)

        new_category = applied.get("category")
        if new_category is not None and new_category != current.category:
            await self._counts.recompute(current.category)
            await self._counts.recompute(new_category)
        logger.debug("Task updated", extra={"task_id": task_id, "fields": sorted(applied)})
        return updated

    async def delete(self, task_id: int) -> bool:
        tasks = await self._storage.load_tasks()
        removed = next((task for task in tasks if task.id == task_id), None)
        if removed is None:
            return False
        await self._storage.save_tasks([task for task in tasks if task.id != task_id])
        await self._counts.recompute(removed.category)
        logger.debug("Task deleted", extra={"task_id": task_id})
        return True

    async def delete_completed(self) -> int:
        """Remove every completed task and return how many were removed."""
        tasks = await self._storage.load_tasks()
        remaining = [task for task in tasks if task.status != TaskStatus.COMPLETED]
        removed = [task for task in tasks if task.status == TaskStatus.COMPLETED]
        if not removed:
            return 0
        await self._storage.save_tasks(remaining)
        for name in sorted({task.category for task in removed}):
            await self._counts.recompute(name)
        return len(removed)

    async def count_in_category(self, name: str) -> int:
        tasks = await self._storage.load_tasks()
        return sum(1 for task in tasks if task.category == name)

    async def reassign_category(self, old_name: str, new_name: str) -> int:
        """Point every task referencing ``old_name`` at ``new_name``."""
        tasks = await self._storage.load_tasks()
        moved = 0
        for task in tasks:
            if task.category == old_name:
                task.category = new_name
                moved += 1
        if moved:
            await self._storage.save_tasks(tasks)
        return moved


__all__ = ["TaskRepository"]
