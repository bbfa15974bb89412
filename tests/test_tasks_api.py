from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _create(client: AsyncClient, **payload) -> dict:
    body = {"title": "Task", "category": "Work", **payload}
    response = await client.post("/api/tasks", json=body)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def test_create_task_returns_camel_case_document(client: AsyncClient) -> None:
    created = await _create(client, title="Buy milk", category="Shopping", dueDate="2024-03-05")

    assert created["id"] == 1
    assert created["title"] == "Buy milk"
    assert created["priority"] == "medium"
    assert created["status"] == "active"
    assert created["dueDate"] == "2024-03-05"
    assert created["completedAt"] is None
    assert created["order"] == 0
    assert created["createdAt"].endswith("Z")


async def test_create_task_validates_payload(client: AsyncClient) -> None:
    response = await client.post("/api/tasks", json={"title": "", "category": "Work"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["code"] == "validation_error"

    too_long = await client.post("/api/tasks", json={"title": "x" * 256, "category": "Work"})
    assert too_long.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    bad_priority = await client.post("/api/tasks", json={"title": "Ok", "category": "Work", "priority": "urgent"})
    assert bad_priority.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


async def test_get_update_and_delete_task(client: AsyncClient) -> None:
    created = await _create(client, title="Draft")

    fetched = await client.get(f"/api/tasks/{created['id']}")
    assert fetched.status_code == status.HTTP_200_OK
    assert fetched.json() == created

    completed = await client.patch(f"/api/tasks/{created['id']}", json={"status": "completed"})
    assert completed.status_code == status.HTTP_200_OK
    assert completed.json()["completedAt"] is not None

    reopened = await client.patch(f"/api/tasks/{created['id']}", json={"status": "active"})
    assert reopened.json()["completedAt"] is None

    deleted = await client.delete(f"/api/tasks/{created['id']}")
    assert deleted.status_code == status.HTTP_204_NO_CONTENT

    missing = await client.delete(f"/api/tasks/{created['id']}")
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["code"] == "not_found"


async def test_update_rejects_empty_and_null_payloads(client: AsyncClient) -> None:
    created = await _create(client)

    empty = await client.patch(f"/api/tasks/{created['id']}", json={})
    assert empty.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    null_title = await client.patch(f"/api/tasks/{created['id']}", json={"title": None})
    assert null_title.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    cleared = await client.patch(f"/api/tasks/{created['id']}", json={"dueDate": None})
    assert cleared.status_code == status.HTTP_200_OK

    unknown = await client.patch("/api/tasks/999", json={"title": "Ghost"})
    assert unknown.status_code == status.HTTP_404_NOT_FOUND


async def test_list_tasks_with_filters_and_sort(client: AsyncClient) -> None:
    await _create(client, title="Buy milk", category="Shopping", priority="low")
    await _create(client, title="Buy bread", category="Shopping", priority="high")
    await _create(client, title="Call", description="ask about milk", category="Personal")

    everything = await client.get("/api/tasks")
    assert [task["title"] for task in everything.json()] == ["Buy milk", "Buy bread", "Call"]

    searched = await client.get("/api/tasks", params={"search": "MILK"})
    assert [task["title"] for task in searched.json()] == ["Buy milk", "Call"]

    shopping = await client.get("/api/tasks", params={"category": "Shopping", "sort": "priority"})
    assert [task["title"] for task in shopping.json()] == ["Buy bread", "Buy milk"]

    active = await client.get("/api/tasks", params={"status": "all", "sort": "alphabetical"})
    assert [task["title"] for task in active.json()] == ["Buy bread", "Buy milk", "Call"]

    invalid = await client.get("/api/tasks", params={"sort": "random"})
    assert invalid.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


async def test_statistics_and_clear_completed(client: AsyncClient) -> None:
    first = await _create(client, title="Done")
    await _create(client, title="Late", dueDate="2000-01-01")
    await _create(client, title="Later", dueDate="2999-01-01")
    await client.patch(f"/api/tasks/{first['id']}", json={"status": "completed"})

    stats = await client.get("/api/tasks/statistics")
    assert stats.status_code == status.HTTP_200_OK
    assert stats.json() == {"total": 3, "completed": 1, "active": 2, "overdue": 1, "completionRate": 33}

    cleared = await client.post("/api/tasks/clear-completed")
    assert cleared.json() == {"removed": 1}

    categories = await client.get("/api/categories")
    work = next(c for c in categories.json() if c["name"] == "Work")
    assert work["count"] == 2
