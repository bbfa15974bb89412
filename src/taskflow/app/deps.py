"""Reusable FastAPI dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from .services import CategoryService, TaskService, TransferService
from .storage import StorageBackend


def get_storage(request: Request) -> StorageBackend:
    """Return the storage backend attached to the running application."""

    return request.app.state.storage


StorageDependency = Annotated[StorageBackend, Depends(get_storage)]


def get_task_service(storage: StorageDependency) -> TaskService:
    return TaskService(storage)


def get_category_service(storage: StorageDependency) -> CategoryService:
    return CategoryService(storage)


def get_transfer_service(storage: StorageDependency) -> TransferService:
    return TransferService(storage)


TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]
CategoryServiceDependency = Annotated[CategoryService, Depends(get_category_service)]
TransferServiceDependency = Annotated[TransferService, Depends(get_transfer_service)]


__all__ = [
    "CategoryServiceDependency",
    "StorageDependency",
    "TaskServiceDependency",
    "TransferServiceDependency",
    "get_category_service",
    "get_storage",
    "get_task_service",
    "get_transfer_service",
]
