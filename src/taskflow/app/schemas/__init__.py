"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .category import CategoryCreate, CategoryRead, CategoryUpdate
from .system import ErrorResponse, HealthCheckResponse, RootResponse
from .task import ClearCompletedResponse, TaskCreate, TaskRead, TaskStatistics, TaskUpdate
from .transfer import EXPORT_FORMAT_VERSION, ExportDocument, ImportResult

__all__ = [
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "ClearCompletedResponse",
    "EXPORT_FORMAT_VERSION",
    "ErrorResponse",
    "ExportDocument",
    "HealthCheckResponse",
    "ImportResult",
    "RootResponse",
    "TaskCreate",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
]
