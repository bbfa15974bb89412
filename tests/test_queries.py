from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from taskflow.app.models import Category, Task, TaskPriority, TaskStatus
from taskflow.app.services.queries import (
    category_color,
    due_date_label,
    filter_tasks,
    is_overdue,
    priority_label,
    sort_tasks,
    task_statistics,
)

NOW = datetime(2024, 3, 5, 15, 30, tzinfo=timezone.utc)


def make_task(task_id: int = 1, **overrides) -> Task:
    values = {
        "id": task_id,
        "title": f"Task {task_id}",
        "category": "Work",
        "created_at": "2024-03-01T09:00:00.000Z",
        "order": task_id - 1,
    }
    values.update(overrides)
    return Task(**values)


@pytest.mark.parametrize(
    "moment",
    [
        datetime(2024, 3, 5, 0, 0, tzinfo=timezone.utc),
        datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc),
        datetime(2024, 3, 5, 23, 59, tzinfo=timezone.utc),
    ],
)
def test_task_due_today_is_never_overdue(moment: datetime) -> None:
    task = make_task(due_date="2024-03-05T00:00:00.000Z")
    assert is_overdue(task, moment) is False


def test_active_task_due_yesterday_is_overdue() -> None:
    task = make_task(due_date="2024-03-04T23:00:00.000Z")
    assert is_overdue(task, NOW) is True


def test_completed_task_is_never_overdue() -> None:
    task = make_task(
        due_date="2023-01-01",
        status=TaskStatus.COMPLETED,
        completed_at="2024-03-01T09:00:00.000Z",
    )
    assert is_overdue(task, NOW) is False


def test_task_without_due_date_is_not_overdue() -> None:
    assert is_overdue(make_task(), NOW) is False
    assert is_overdue(make_task(due_date="not a date"), NOW) is False


def test_due_date_label_variants() -> None:
    assert due_date_label(make_task(due_date="2024-03-04"), NOW) == "Overdue by 1 day"
    assert due_date_label(make_task(due_date="2024-03-01"), NOW) == "Overdue by 4 days"
    assert due_date_label(make_task(due_date="2024-03-05"), NOW) == "Due Mar 5"
    assert due_date_label(make_task(due_date="2024-12-25T10:00:00.000Z"), NOW) == "Due Dec 25"
    assert due_date_label(make_task(), NOW) == ""
    assert due_date_label(make_task(due_date="garbage"), NOW) == ""


def test_completed_task_past_due_is_labelled_due() -> None:
    task = make_task(due_date="2024-03-01", status=TaskStatus.COMPLETED)
    assert due_date_label(task, NOW) == "Due Mar 1"


def test_task_statistics_counts_and_rate() -> None:
    tasks = [
        make_task(1, status=TaskStatus.COMPLETED),
        make_task(2),
        make_task(3, due_date="2024-03-01"),
    ]
    stats = task_statistics(tasks, NOW)
    assert stats.total == 3
    assert stats.completed == 1
    assert stats.active == 2
    assert stats.overdue == 1
    assert stats.completion_rate == 33


def test_task_statistics_rounds_half_up() -> None:
    tasks = [make_task(i) for i in range(1, 9)]
    tasks[0] = make_task(1, status=TaskStatus.COMPLETED)
    assert task_statistics(tasks, NOW).completion_rate == 13

    pair = [make_task(1, status=TaskStatus.COMPLETED), make_task(2)]
    assert task_statistics(pair, NOW).completion_rate == 50

    thirds = [make_task(1, status=TaskStatus.COMPLETED), make_task(2, status=TaskStatus.COMPLETED), make_task(3)]
    assert task_statistics(thirds, NOW).completion_rate == 67


def test_task_statistics_of_empty_collection() -> None:
    stats = task_statistics([], NOW)
    assert stats.model_dump(by_alias=True) == {
        "total": 0,
        "completed": 0,
        "active": 0,
        "overdue": 0,
        "completionRate": 0,
    }


def test_search_matches_title_or_description_ignoring_case() -> None:
    tasks = [
        make_task(1, title="Buy milk"),
        make_task(2, title="Errand", description="need MILK"),
        make_task(3, title="Buy bread"),
    ]
    matched = filter_tasks(tasks, search="milk")
    assert [task.id for task in matched] == [1, 2]


def test_filters_are_combined() -> None:
    tasks = [
        make_task(1, category="Work"),
        make_task(2, category="Home", status=TaskStatus.COMPLETED),
        make_task(3, category="Work", status=TaskStatus.COMPLETED),
    ]
    assert [task.id for task in filter_tasks(tasks, status="all")] == [1, 2, 3]
    assert [task.id for task in filter_tasks(tasks, status="completed")] == [2, 3]
    assert [task.id for task in filter_tasks(tasks, status="completed", category="Work")] == [3]
    assert filter_tasks(tasks, category="work") == []


def test_sort_by_priority_places_high_first() -> None:
    tasks = [
        make_task(1, priority=TaskPriority.LOW),
        make_task(2, priority=TaskPriority.HIGH),
        make_task(3, priority=TaskPriority.MEDIUM),
    ]
    ordered = sort_tasks(tasks, "priority")
    assert [task.priority for task in ordered] == [
        TaskPriority.HIGH,
        TaskPriority.MEDIUM,
        TaskPriority.LOW,
    ]


def test_sort_by_due_puts_missing_dates_last() -> None:
    tasks = [
        make_task(1),
        make_task(2, due_date="2024-04-01"),
        make_task(3),
        make_task(4, due_date="2024-03-10"),
    ]
    assert [task.id for task in sort_tasks(tasks, "due")] == [4, 2, 1, 3]


def test_sort_by_created_is_newest_first() -> None:
    base = datetime(2024, 3, 1, tzinfo=timezone.utc)
    tasks = [
        make_task(i, created_at=(base + timedelta(hours=i)).isoformat())
        for i in range(1, 4)
    ]
    assert [task.id for task in sort_tasks(tasks, "created")] == [3, 2, 1]


def test_sort_alphabetical_is_case_sensitive() -> None:
    tasks = [make_task(1, title="banana"), make_task(2, title="Apple"), make_task(3, title="cherry")]
    assert [task.title for task in sort_tasks(tasks, "alphabetical")] == ["Apple", "banana", "cherry"]


def test_unknown_sort_key_returns_unchanged_copy() -> None:
    tasks = [make_task(2), make_task(1)]
    result = sort_tasks(tasks, "bogus")
    assert result == tasks
    assert result is not tasks


def test_priority_label_and_category_color() -> None:
    assert priority_label("high") == "High Priority"
    assert priority_label(TaskPriority.LOW) == "Low Priority"
    assert priority_label("urgent") == "urgent"

    categories = [Category(id=1, name="Work", color="#123456")]
    assert category_color("Work", categories) == "#123456"
    assert category_color("Other", categories) == "#1976D2"
