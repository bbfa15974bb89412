from __future__ import annotations

import asyncio

import pytest

from taskflow.app.errors import CategoryInUseError, DuplicateNameError, NotFoundError
from taskflow.app.models import TaskStatus
from taskflow.app.schemas import CategoryCreate, CategoryUpdate, TaskCreate, TaskUpdate
from taskflow.app.services import CategoryService, TaskService
from taskflow.app.storage import InMemoryStorage

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def task_service(storage: InMemoryStorage, clock) -> TaskService:
    return TaskService(storage, clock=clock)


@pytest.fixture()
def category_service(storage: InMemoryStorage) -> CategoryService:
    return CategoryService(storage)


async def _category(service: CategoryService, name: str):
    return next(category for category in await service.list_categories() if category.name == name)


async def test_update_task_applies_only_supplied_fields(task_service: TaskService) -> None:
    task = await task_service.create_task(
        TaskCreate(title="Buy milk", description="Semi-skimmed", category="Shopping")
    )

    updated = await task_service.update_task(task.id, TaskUpdate(title="Buy oat milk"))
    assert updated.title == "Buy oat milk"
    assert updated.description == "Semi-skimmed"
    assert updated.completed_at is None

    cleared = await task_service.update_task(task.id, TaskUpdate(description=None))
    assert cleared.description is None


async def test_get_and_update_unknown_task_raise_not_found(task_service: TaskService) -> None:
    with pytest.raises(NotFoundError):
        await task_service.get_task(123)
    with pytest.raises(NotFoundError):
        await task_service.update_task(123, TaskUpdate(title="Missing"))
    assert await task_service.delete_task(123) is False


async def test_list_tasks_filters_and_sorts(task_service: TaskService) -> None:
    await task_service.create_task(TaskCreate(title="b chore", category="Personal", priority="low"))
    await task_service.create_task(TaskCreate(title="a report", category="Work", priority="high"))
    await task_service.create_task(TaskCreate(title="c email", category="Work"))

    work = await task_service.list_tasks(category="Work", sort="alphabetical")
    assert [task.title for task in work] == ["a report", "c email"]

    by_priority = await task_service.list_tasks(sort="priority")
    assert [task.title for task in by_priority] == ["a report", "c email", "b chore"]


async def test_clear_completed_and_statistics(task_service: TaskService) -> None:
    done = await task_service.create_task(TaskCreate(title="Done", category="Work"))
    await task_service.update_task(done.id, TaskUpdate(status=TaskStatus.COMPLETED))
    await task_service.create_task(TaskCreate(title="Late", category="Work", due_date="2024-03-01"))

    stats = await task_service.statistics()
    assert (stats.total, stats.completed, stats.active, stats.overdue) == (2, 1, 1, 1)
    assert stats.completion_rate == 50

    assert await task_service.clear_completed() == 1
    assert (await task_service.statistics()).total == 1


async def test_create_category_counts_existing_references(
    task_service: TaskService,
    category_service: CategoryService,
) -> None:
    await task_service.create_task(TaskCreate(title="Weed beds", category="Garden"))
    created = await category_service.create_category(CategoryCreate(name="Garden"))
    assert created.count == 1


async def test_create_category_duplicate_is_rejected(category_service: CategoryService) -> None:
    with pytest.raises(DuplicateNameError):
        await category_service.create_category(CategoryCreate(name="HEALTH"))


async def test_delete_in_use_category_never_reaches_repository(
    task_service: TaskService,
    category_service: CategoryService,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    await task_service.create_task(TaskCreate(title="Report", category="Work"))
    work = await _category(category_service, "Work")

    calls: list[int] = []

    async def _recording_delete(category_id: int) -> bool:
        calls.append(category_id)
        return True

    monkeypatch.setattr(category_service.repository, "delete", _recording_delete)

    with pytest.raises(CategoryInUseError) as excinfo:
        await category_service.delete_category(work.id)

    assert calls == []
    assert excinfo.value.task_count == 1
    assert excinfo.value.code == "category_in_use"
    assert await _category(category_service, "Work") == work


async def test_delete_unused_category(category_service: CategoryService) -> None:
    shopping = await _category(category_service, "Shopping")
    await category_service.delete_category(shopping.id)
    assert "Shopping" not in {c.name for c in await category_service.list_categories()}

    with pytest.raises(NotFoundError):
        await category_service.delete_category(shopping.id)


async def test_rename_moves_tasks_and_resyncs_counts(
    task_service: TaskService,
    category_service: CategoryService,
) -> None:
    task = await task_service.create_task(TaskCreate(title="Report", category="Work"))
    work = await _category(category_service, "Work")

    renamed = await category_service.update_category(work.id, CategoryUpdate(name="Office"))
    assert renamed.name == "Office"
    assert renamed.count == 1
    assert (await task_service.get_task(task.id)).category == "Office"

    with pytest.raises(DuplicateNameError):
        await category_service.update_category(work.id, CategoryUpdate(name="personal"))
    with pytest.raises(NotFoundError):
        await category_service.update_category(999, CategoryUpdate(color="#fff"))


async def test_concurrent_creations_keep_unique_ids_and_orders(task_service: TaskService) -> None:
    tasks = await asyncio.gather(
        *(task_service.create_task(TaskCreate(title=f"Task {i}", category="Work")) for i in range(10))
    )
    assert len({task.id for task in tasks}) == 10
    assert sorted(task.order for task in tasks) == list(range(10))
    work = next(c for c in await CategoryService(task_service.repository.storage).list_categories() if c.name == "Work")
    assert work.count == 10
