"""Service layer orchestrating repositories and derived views."""

from __future__ import annotations

from .categories import CategoryService
from .tasks import TaskService
from .transfer import TransferService, export_filename

__all__ = ["CategoryService", "TaskService", "TransferService", "export_filename"]
