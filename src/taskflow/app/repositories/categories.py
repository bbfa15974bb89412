"""Repository encapsulating category persistence."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..errors import DuplicateNameError
from ..models import Category
from ..schemas import CategoryCreate
from ..storage import StorageBackend

logger = logging.getLogger(__name__)


def _same_name(left: str, right: str) -> bool:
    return left.lower() == right.lower()


class CategoryRepository:
    """Create, rename, delete and list categories over a storage backend.

    Deletion is unconditional here; refusing to delete a category that tasks
    still use is the service layer's job.
    """

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    async def list(self) -> list[Category]:
        return await self._storage.load_categories()

    async def get(self, category_id: int) -> Category | None:
        categories = await self._storage.load_categories()
        return next((category for category in categories if category.id == category_id), None)

    async def find_by_name(self, name: str) -> Category | None:
        """Return the category whose name matches ``name`` ignoring case."""
        categories = await self._storage.load_categories()
        return next((category for category in categories if _same_name(category.name, name)), None)

    async def create(self, payload: CategoryCreate) -> Category:
        """Persist a new category with a zero count.

        Raises :class:`DuplicateNameError` when the name collides with an
        existing category ignoring case.
        """
        categories = await self._storage.load_categories()
        if any(_same_name(category.name, payload.name) for category in categories):
            raise DuplicateNameError(payload.name)
        category = Category(
            id=await self._storage.next_id("categories"),
            name=payload.name,
            color=payload.color,
            count=0,
        )
        categories.append(category)
        await self._storage.save_categories(categories)
        logger.debug("Category stored", extra={"category_id": category.id})
        return category

    async def update(self, category_id: int, changes: Mapping[str, Any]) -> Category | None:
        """Rename or recolor a category, returning ``None`` if it does not exist."""
        categories = await self._storage.load_categories()
        index = next((i for i, category in enumerate(categories) if category.id == category_id), None)
        if index is None:
            return None
        applied = {key: value for key, value in changes.items() if key in {"name", "color"}}
        new_name = applied.get("name")
        if new_name is not None and any(
            category.id != category_id and _same_name(category.name, new_name)
            for category in categories
        ):
            raise DuplicateNameError(new_name)
        updated = categories[index].model_copy(update=applied)
        categories[index] = updated
        await self._storage.save_categories(categories)
        return updated

    async def delete(self, category_id: int) -> bool:
        categories = await self._storage.load_categories()
        remaining = [category for category in categories if category.id != category_id]
        if len(remaining) == len(categories):
            return False
        await self._storage.save_categories(remaining)
        logger.debug("Category deleted", extra={"category_id": category_id})
        return True


__all__ = ["CategoryRepository"]
