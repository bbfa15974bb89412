"""Process-local storage adapter."""

from __future__ import annotations

import logging

from ..models import Category, Task, default_categories
from .base import SequenceName, StorageBackend

logger = logging.getLogger(__name__)


class InMemoryStorage(StorageBackend):
    """Keep tasks and categories in dictionaries keyed by id.

    State lives for the lifetime of the instance only.
    """

    name = "memory"

    def __init__(self, *, seed_default_categories: bool = True) -> None:
        super().__init__()
        self._tasks: dict[int, Task] = {}
        self._categories: dict[int, Category] = {}
        self._sequences: dict[str, int] = {"tasks": 0, "categories": 0}
        if seed_default_categories:
            for category in default_categories():
                self._categories[category.id] = category
            self._sequences["categories"] = len(self._categories)
            logger.debug("Seeded default categories", extra={"count": len(self._categories)})

    async def load_tasks(self) -> list[Task]:
        return [task.model_copy(deep=True) for task in self._tasks.values()]

    async def save_tasks(self, tasks: list[Task]) -> None:
        self._tasks = {task.id: task.model_copy(deep=True) for task in tasks}

    async def load_categories(self) -> list[Category]:
        return [category.model_copy(deep=True) for category in self._categories.values()]

    async def save_categories(self, categories: list[Category]) -> None:
        self._categories = {category.id: category.model_copy(deep=True) for category in categories}

    async def next_id(self, sequence: SequenceName) -> int:
        self._sequences[sequence] += 1
        return self._sequences[sequence]


__all__ = ["InMemoryStorage"]
