"""Router registrations for the TaskFlow API."""

from __future__ import annotations

from fastapi import APIRouter

from .categories import router as categories_router
from .health import router as health_router
from .tasks import router as tasks_router
from .transfer import router as transfer_router

api_router = APIRouter()
api_router.include_router(tasks_router)
api_router.include_router(categories_router)
api_router.include_router(transfer_router)

__all__ = ["api_router", "health_router"]
