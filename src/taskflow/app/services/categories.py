"""Service layer encapsulating category-related operations."""

from __future__ import annotations

import logging

from ..errors import CategoryInUseError, NotFoundError
from ..models import Category
from ..repositories import CategoryCountMaintainer, CategoryRepository, TaskRepository
from ..schemas import CategoryCreate, CategoryUpdate
from ..storage import StorageBackend

logger = logging.getLogger(__name__)


def _category_not_found(category_id: int) -> NotFoundError:
    return NotFoundError(
        "Category not found.",
        description=f"Category {category_id} does not exist.",
        details={"category_id": category_id},
    )


class CategoryService:
    """High-level business orchestration for ``Category`` entities.

    Owns the rule that a category cannot be deleted while tasks use it.
    """

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage
        self._counts = CategoryCountMaintainer(storage)
        self._repository = CategoryRepository(storage)
        self._tasks = TaskRepository(storage, counts=self._counts)

    @property
    def repository(self) -> CategoryRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def list_categories(self) -> list[Category]:
        return await self._repository.list()

    async def create_category(self, payload: CategoryCreate) -> Category:
        """Create a category, counting any tasks that already reference its name."""
        async with self._storage.lock:
            category = await self._repository.create(payload)
            await self._counts.recompute(category.name)
            stored = await self._repository.get(category.id)
        logger.info("Category created", extra={"category_id": category.id, "category": category.name})
        return stored or category

    async def update_category(self, category_id: int, payload: CategoryUpdate) -> Category:
        """Rename or recolor a category.

        A rename moves every task referencing the old name over to the new
        one and resynchronises all counts.
        """
        changes = payload.changes()
        async with self._storage.lock:
            existing = await self._repository.get(category_id)
            if existing is None:
                raise _category_not_found(category_id)
            updated = await self._repository.update(category_id, changes)
            if updated is None:
                raise _category_not_found(category_id)
            if updated.name != existing.name:
                moved = await self._tasks.reassign_category(existing.name, updated.name)
                await self._counts.recompute_all()
                logger.info(
                    "Category renamed",
                    extra={"category_id": category_id, "previous_name": existing.name, "new_name": updated.name, "moved": moved},
                )
            stored = await self._repository.get(category_id)
        return stored or updated

    async def delete_category(self, category_id: int) -> None:
        """Delete an unused category.

        Raises :class:`NotFoundError` for unknown ids and
        :class:`CategoryInUseError` while any task references the category.
        """
        async with self._storage.lock:
            category = await self._repository.get(category_id)
            if category is None:
                raise _category_not_found(category_id)
            in_use = await self._tasks.count_in_category(category.name)
            if in_use:
                logger.warning(
                    "Refusing to delete category in use",
                    extra={"category_id": category_id, "task_count": in_use},
                )
                raise CategoryInUseError(category.name, in_use)
            await self._repository.delete(category_id)
        logger.info("Category deleted", extra={"category_id": category_id, "category": category.name})


__all__ = ["CategoryService"]
