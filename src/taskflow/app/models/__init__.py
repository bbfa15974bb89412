"""Domain models exposed for the TaskFlow service."""

from __future__ import annotations

from .category import DEFAULT_CATEGORIES, DEFAULT_CATEGORY_COLOR, Category, default_categories
from .common import CamelModel, parse_iso, to_iso, utcnow
from .task import Task, TaskPriority, TaskStatus

__all__ = [
    "CamelModel",
    "Category",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY_COLOR",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "default_categories",
    "parse_iso",
    "to_iso",
    "utcnow",
]
