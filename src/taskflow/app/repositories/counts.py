"""Keep cached category usage counts in line with the task collection."""

from __future__ import annotations

import logging
from collections import Counter

from ..storage import StorageBackend

logger = logging.getLogger(__name__)


class CategoryCountMaintainer:
    """Recompute ``Category.count`` from the tasks that reference each name.

    Matching is case-sensitive, and tasks naming an unknown category are not
    counted anywhere.
    """

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    async def recompute(self, name: str) -> None:
        """Overwrite the count of the category called exactly ``name``."""
        categories = await self._storage.load_categories()
        target = next((category for category in categories if category.name == name), None)
        if target is None:
            return
        tasks = await self._storage.load_tasks()
        target.count = sum(1 for task in tasks if task.category == name)
        await self._storage.save_categories(categories)
        logger.debug("Category count recomputed", extra={"category": name, "count": target.count})

    async def recompute_all(self) -> None:
        """Resynchronise the count of every category."""
        categories = await self._storage.load_categories()
        usage = Counter(task.category for task in await self._storage.load_tasks())
        for category in categories:
            category.count = usage.get(category.name, 0)
        await self._storage.save_categories(categories)
        logger.debug("All category counts recomputed", extra={"categories": len(categories)})


__all__ = ["CategoryCountMaintainer"]
