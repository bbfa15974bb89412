"""Schemas for the import/export document."""

from __future__ import annotations

from pydantic import Field

from ..models import CamelModel, Category, Task

EXPORT_FORMAT_VERSION = "1.0"


class ExportDocument(CamelModel):
    """Portable snapshot of every task and category."""

    tasks: list[Task] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    export_date: str
    version: str = EXPORT_FORMAT_VERSION


class ImportResult(CamelModel):
    """Outcome of a best-effort import batch."""

    imported: int = Field(ge=0)
    total: int = Field(ge=0)
    failed: int = Field(ge=0)
    categories_created: int = Field(ge=0)
    categories_skipped: int = Field(ge=0)
    categories_failed: int = Field(default=0, ge=0)
    message: str


__all__ = ["EXPORT_FORMAT_VERSION", "ExportDocument", "ImportResult"]
