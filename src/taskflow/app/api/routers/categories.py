"""Routes handling category management."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from ...deps import CategoryServiceDependency
from ...models import Category
from ...schemas import CategoryCreate, CategoryRead, CategoryUpdate

router = APIRouter(prefix="/categories", tags=["categories"])


def _map_category(category: Category) -> CategoryRead:
    return CategoryRead.model_validate(category, from_attributes=True)


@router.get("", response_model=list[CategoryRead], summary="List categories")
async def list_categories(service: CategoryServiceDependency) -> list[CategoryRead]:
    return [_map_category(category) for category in await service.list_categories()]


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(payload: CategoryCreate, service: CategoryServiceDependency) -> CategoryRead:
    return _map_category(await service.create_category(payload))


@router.patch(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Rename or recolor a category",
)
async def update_category(
    category_id: int,
    payload: CategoryUpdate,
    service: CategoryServiceDependency,
) -> CategoryRead:
    return _map_category(await service.update_category(category_id, payload))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an unused category",
)
async def delete_category(category_id: int, service: CategoryServiceDependency) -> Response:
    await service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
