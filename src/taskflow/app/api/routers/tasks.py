"""Routes handling task CRUD operations."""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Query, Response, status

from ...deps import TaskServiceDependency
from ...errors import NotFoundError
from ...models import Task
from ...schemas import ClearCompletedResponse, TaskCreate, TaskRead, TaskStatistics, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])

StatusQuery = Annotated[
    Literal["all", "active", "completed"] | None,
    Query(description="Restrict results to tasks in this status; 'all' disables the filter."),
]
CategoryQuery = Annotated[
    str | None,
    Query(description="Restrict results to tasks in the named category (exact match)."),
]
SearchQuery = Annotated[
    str | None,
    Query(description="Case-insensitive text matched against title and description."),
]
SortQuery = Annotated[
    Literal["created", "due", "priority", "alphabetical"] | None,
    Query(description="Ordering applied after filtering."),
]


def _map_task(task: Task) -> TaskRead:
    return TaskRead.model_validate(task, from_attributes=True)


@router.get(
    "",
    response_model=list[TaskRead],
    summary="List tasks with optional filtering and sorting",
)
async def list_tasks(
    service: TaskServiceDependency,
    status: StatusQuery = None,
    category: CategoryQuery = None,
    search: SearchQuery = None,
    sort: SortQuery = None,
) -> list[TaskRead]:
    tasks = await service.list_tasks(status=status, category=category, search=search, sort=sort)
    return [_map_task(task) for task in tasks]


@router.get(
    "/statistics",
    response_model=TaskStatistics,
    summary="Aggregate task statistics",
)
async def read_statistics(service: TaskServiceDependency) -> TaskStatistics:
    return await service.statistics()


@router.get(
    "/{task_id}",
    response_model=TaskRead,
    summary="Retrieve a single task",
)
async def read_task(task_id: int, service: TaskServiceDependency) -> TaskRead:
    return _map_task(await service.get_task(task_id))


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(payload: TaskCreate, service: TaskServiceDependency) -> TaskRead:
    return _map_task(await service.create_task(payload))


@router.patch(
    "/{task_id}",
    response_model=TaskRead,
    summary="Partially update a task",
)
async def update_task(task_id: int, payload: TaskUpdate, service: TaskServiceDependency) -> TaskRead:
    return _map_task(await service.update_task(task_id, payload))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task",
)
async def delete_task(task_id: int, service: TaskServiceDependency) -> Response:
    if not await service.delete_task(task_id):
        raise NotFoundError(
            "Task not found.",
            description=f"Task {task_id} does not exist.",
            details={"task_id": task_id},
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/clear-completed",
    response_model=ClearCompletedResponse,
    summary="Delete every completed task",
)
async def clear_completed(service: TaskServiceDependency) -> ClearCompletedResponse:
    removed = await service.clear_completed()
    return ClearCompletedResponse(removed=removed)
