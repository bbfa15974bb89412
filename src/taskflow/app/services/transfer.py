"""Import and export of the whole task/category collection."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from datetime import datetime
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from ..errors import DuplicateNameError, InvalidFormatError
from ..models import DEFAULT_CATEGORY_COLOR, TaskPriority, TaskStatus, to_iso, utcnow
from ..schemas import CategoryCreate, ExportDocument, ImportResult, TaskCreate
from ..schemas.category import HEX_COLOR_PATTERN
from ..storage import StorageBackend
from .categories import CategoryService
from .tasks import TaskService

logger = logging.getLogger(__name__)

EXPORT_FILENAME_TEMPLATE = "taskflow-backup-{date}.json"


def export_filename(now: datetime) -> str:
    """Return the suggested download name, e.g. ``taskflow-backup-2024-03-05.json``."""
    return EXPORT_FILENAME_TEMPLATE.format(date=now.strftime("%Y-%m-%d"))


def _parse_document(document: Any) -> Mapping[str, Any]:
    if isinstance(document, (bytes, bytearray)):
        document = document.decode("utf-8", errors="replace")
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except ValueError as exc:
            raise InvalidFormatError("Document is not valid JSON.") from exc
    if not isinstance(document, Mapping):
        raise InvalidFormatError("Document must be a JSON object.")
    if not isinstance(document.get("tasks"), list) or not isinstance(document.get("categories"), list):
        raise InvalidFormatError("Document must contain 'tasks' and 'categories' lists.")
    return document


def _category_payload(record: Any) -> CategoryCreate:
    """Build a creation payload from an exported category record.

    Colors that are not hex codes fall back to the default color.
    """
    if not isinstance(record, Mapping):
        raise TypeError("Category record must be an object.")
    color = record.get("color")
    if not isinstance(color, str) or re.fullmatch(HEX_COLOR_PATTERN, color) is None:
        color = DEFAULT_CATEGORY_COLOR
    return CategoryCreate.model_validate({"name": record.get("name"), "color": color})


def _task_payload(record: Any) -> TaskCreate:
    """Build a creation payload from an exported task record.

    Imported tasks always start active; priority falls back to medium and
    description to an empty string.
    """
    if not isinstance(record, Mapping):
        raise TypeError("Task record must be an object.")
    return TaskCreate.model_validate(
        {
            "title": record.get("title"),
            "description": record.get("description") or "",
            "category": record.get("category"),
            "priority": record.get("priority") or TaskPriority.MEDIUM.value,
            "status": TaskStatus.ACTIVE.value,
            "dueDate": record.get("dueDate") or record.get("due_date") or None,
        }
    )


class TransferService:
    """Export snapshots and import them back through the regular services."""

    def __init__(
        self,
        storage: StorageBackend,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._tasks = TaskService(storage, clock=clock)
        self._categories = CategoryService(storage)

    async def export_document(self) -> ExportDocument:
        """Return every task and category stamped with the export time."""
        tasks = await self._tasks.repository.list()
        categories = await self._categories.list_categories()
        return ExportDocument(tasks=tasks, categories=categories, export_date=to_iso(self._clock()))

    def export_filename(self) -> str:
        return export_filename(self._clock())

    async def _import_categories(self, records: list[Any]) -> tuple[int, int, int]:
        """Create the categories of an import batch.

        Returns ``(created, skipped, failed)``. Names already present,
        ignoring case, are skipped; records that cannot form a category fail.
        """
        existing = {category.name.lower() for category in await self._categories.list_categories()}
        pending: list[CategoryCreate] = []
        skipped = failed = 0
        for position, record in enumerate(records):
            try:
                payload = _category_payload(record)
            except (TypeError, ValidationError):
                failed += 1
                logger.warning("Category import failed", extra={"position": position, "error": "invalid_record"})
                continue
            if payload.name.lower() in existing:
                skipped += 1
                continue
            existing.add(payload.name.lower())
            pending.append(payload)

        results = await asyncio.gather(
            *(self._categories.create_category(payload) for payload in pending),
            return_exceptions=True,
        )
        created = 0
        for payload, result in zip(pending, results):
            if isinstance(result, DuplicateNameError):
                skipped += 1
            elif isinstance(result, BaseException):
                failed += 1
                logger.warning(
                    "Category import failed",
                    extra={"category": payload.name, "error": type(result).__name__},
                )
            else:
                created += 1
        return created, skipped, failed

    async def _create_task(self, record: Any) -> None:
        await self._tasks.create_task(_task_payload(record))

    async def import_document(self, document: Any) -> ImportResult:
        """Import categories first, then tasks, tolerating per-item failures.

        Raises :class:`InvalidFormatError` if ``document`` is not an export
        document. Nothing is rolled back when individual items fail.
        """
        parsed = _parse_document(document)
        task_records: list[Any] = parsed["tasks"]
        categories_created, categories_skipped, categories_failed = await self._import_categories(
            parsed["categories"]
        )

        results = await asyncio.gather(
            *(self._create_task(record) for record in task_records),
            return_exceptions=True,
        )
        imported = 0
        for position, result in enumerate(results):
            if isinstance(result, BaseException):
                logger.warning(
                    "Task import failed",
                    extra={"position": position, "error": type(result).__name__},
                )
            else:
                imported += 1

        await self._tasks.resync_counts()
        total = len(task_records)
        logger.info(
            "Import finished",
            extra={
                "imported": imported,
                "total": total,
                "categories_created": categories_created,
                "categories_skipped": categories_skipped,
                "categories_failed": categories_failed,
            },
        )
        return ImportResult(
            imported=imported,
            total=total,
            failed=total - imported,
            categories_created=categories_created,
            categories_skipped=categories_skipped,
            categories_failed=categories_failed,
            message=f"{imported} of {total} tasks imported successfully.",
        )


__all__ = ["EXPORT_FILENAME_TEMPLATE", "TransferService", "export_filename"]
