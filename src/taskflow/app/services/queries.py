"""Pure functions deriving view data from task collections."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Sequence

from ..models import DEFAULT_CATEGORY_COLOR, Category, Task, TaskStatus, parse_iso
from ..schemas import TaskStatistics

SORT_KEYS = ("created", "due", "priority", "alphabetical")

PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}

PRIORITY_LABELS = {
    "high": "High Priority",
    "medium": "Medium Priority",
    "low": "Low Priority",
}


def _value(field: object) -> str:
    return getattr(field, "value", field)  # type: ignore[return-value]


def _due_in_local_frame(task: Task, now: datetime) -> datetime | None:
    due = parse_iso(task.due_date)
    if due is None:
        return None
    if due.tzinfo is not None and now.tzinfo is not None:
        due = due.astimezone(now.tzinfo)
    return due


def is_overdue(task: Task, now: datetime) -> bool:
    """Return ``True`` when an unfinished task's due day is before today.

    Only calendar days are compared, so a task due today is never overdue.
    """
    if task.status == TaskStatus.COMPLETED:
        return False
    due = _due_in_local_frame(task, now)
    if due is None:
        return False
    return due.date() < now.date()


def due_date_label(task: Task, now: datetime) -> str:
    """Render ``Overdue by N days`` or ``Due Mar 5``; empty without a usable date."""
    due = _due_in_local_frame(task, now)
    if due is None:
        return ""
    if is_overdue(task, now):
        days = (now.date() - due.date()).days
        return f"Overdue by {days} day{'s' if days != 1 else ''}"
    return f"Due {due:%b} {due.day}"


def task_statistics(tasks: Sequence[Task], now: datetime) -> TaskStatistics:
    total = len(tasks)
    completed = sum(1 for task in tasks if task.status == TaskStatus.COMPLETED)
    active = sum(1 for task in tasks if task.status == TaskStatus.ACTIVE)
    overdue = sum(1 for task in tasks if is_overdue(task, now))
    # round half up
    rate = math.floor(completed * 100 / total + 0.5) if total else 0
    return TaskStatistics(
        total=total,
        completed=completed,
        active=active,
        overdue=overdue,
        completion_rate=rate,
    )


def filter_tasks(
    tasks: Iterable[Task],
    *,
    status: str | None = None,
    category: str | None = None,
    search: str | None = None,
) -> list[Task]:
    """Return the tasks matching every supplied criterion.

    ``status`` of ``None`` or ``"all"`` matches everything. ``search`` is a
    case-insensitive substring test against the title and the description.
    """
    needle = search.lower() if search else None
    matched: list[Task] = []
    for task in tasks:
        if status and status != "all" and _value(task.status) != status:
            continue
        if category and task.category != category:
            continue
        if needle:
            in_title = needle in task.title.lower()
            in_description = bool(task.description) and needle in task.description.lower()  # type: ignore[union-attr]
            if not (in_title or in_description):
                continue
        matched.append(task)
    return matched


def _created_key(task: Task) -> float:
    created = parse_iso(task.created_at)
    return created.timestamp() if created is not None else float("-inf")


def sort_tasks(tasks: Iterable[Task], key: str | None) -> list[Task]:
    """Return a sorted copy of ``tasks``; unknown keys keep the input order."""
    ordered = list(tasks)
    if key == "created":
        ordered.sort(key=_created_key, reverse=True)
    elif key == "due":
        with_due = [task for task in ordered if parse_iso(task.due_date) is not None]
        without_due = [task for task in ordered if parse_iso(task.due_date) is None]
        with_due.sort(key=lambda task: parse_iso(task.due_date).timestamp())  # type: ignore[union-attr]
        ordered = with_due + without_due
    elif key == "priority":
        ordered.sort(key=lambda task: PRIORITY_RANK.get(_value(task.priority), 0), reverse=True)
    elif key == "alphabetical":
        ordered.sort(key=lambda task: task.title)
    return ordered


def priority_label(priority: str) -> str:
    value = _value(priority)
    return PRIORITY_LABELS.get(value, value)


def category_color(name: str, categories: Iterable[Category]) -> str:
    """Return the color of the category called ``name`` or the default blue."""
    for category in categories:
        if category.name == name:
            return category.color or DEFAULT_CATEGORY_COLOR
    return DEFAULT_CATEGORY_COLOR


__all__ = [
    "PRIORITY_RANK",
    "SORT_KEYS",
    "category_color",
    "due_date_label",
    "filter_tasks",
    "is_overdue",
    "priority_label",
    "sort_tasks",
    "task_statistics",
]
