"""Persisted key-value storage with timestamped, expiring entries.

Every key holds a JSON envelope ``{"data": <value>, "timestamp": <epoch-ms>}``.
Entries older than the configured lifetime are removed on read and the
caller's default is returned instead.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError
from redis.asyncio import Redis

from ..models import DEFAULT_CATEGORIES, Category, Task, default_categories, utcnow
from .base import SequenceName, StorageBackend

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TTL_DAYS = 30


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _is_blank(data: Any) -> bool:
    """Return ``True`` for null and blank scalar values.

    Empty lists and objects count as stored values.
    """
    if isinstance(data, (list, dict)):
        return False
    return not data


class LocalStore:
    """Envelope-and-expiry layer over a Redis-compatible client."""

    def __init__(
        self,
        client: Redis,
        *,
        ttl_days: int = DEFAULT_TTL_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client = client
        self._ttl = timedelta(days=ttl_days)
        self._clock = clock

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``.

        Missing, expired, unreadable and null or blank scalar entries yield
        ``default``; a stored empty list is returned as-is.
        """
        raw = await self._client.get(key)
        if raw is None:
            return default
        try:
            entry = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable stored entry", extra={"key": key}, exc_info=True)
            return default
        if not isinstance(entry, dict):
            logger.warning("Discarding stored entry without envelope", extra={"key": key})
            return default

        timestamp = entry.get("timestamp")
        if isinstance(timestamp, (int, float)) and timestamp:
            age_ms = _epoch_ms(self._clock()) - timestamp
            if age_ms > self._ttl.total_seconds() * 1000:
                await self._client.delete(key)
                logger.info("Expired stored entry removed", extra={"key": key, "age_ms": age_ms})
                return default

        data = entry.get("data")
        if _is_blank(data):
            return default
        return data

    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` stamped with the current time."""
        envelope = {"data": jsonable_encoder(value), "timestamp": _epoch_ms(self._clock())}
        await self._client.set(key, json.dumps(envelope))

    async def close(self) -> None:
        await self._client.aclose()


class PersistedStorage(StorageBackend):
    """Storage backend writing whole collections through a :class:`LocalStore`."""

    name = "redis"

    def __init__(
        self,
        store: LocalStore,
        *,
        key_prefix: str = "taskflow",
        seed_default_categories: bool = True,
    ) -> None:
        super().__init__()
        self._store = store
        self._seed = seed_default_categories
        self.tasks_key = f"{key_prefix}-tasks"
        self.categories_key = f"{key_prefix}-categories"
        self.sequence_key = f"{key_prefix}-sequence"

    @staticmethod
    def _validate_all(model: type[ModelT], records: Iterable[Any], key: str) -> list[ModelT]:
        items: list[ModelT] = []
        for record in records:
            try:
                items.append(model.model_validate(record))
            except ValidationError:
                logger.warning("Skipping invalid stored record", extra={"key": key}, exc_info=True)
        return items

    async def load_tasks(self) -> list[Task]:
        records = await self._store.get(self.tasks_key, [])
        if not isinstance(records, list):
            return []
        return self._validate_all(Task, records, self.tasks_key)

    async def save_tasks(self, tasks: list[Task]) -> None:
        await self._store.set(self.tasks_key, [task.model_dump(by_alias=True) for task in tasks])

    async def load_categories(self) -> list[Category]:
        records = await self._store.get(self.categories_key, None)
        if records is None:
            if not self._seed:
                return []
            return default_categories()
        if not isinstance(records, list):
            return []
        return self._validate_all(Category, records, self.categories_key)

    async def save_categories(self, categories: list[Category]) -> None:
        await self._store.set(
            self.categories_key,
            [category.model_dump(by_alias=True) for category in categories],
        )

    async def next_id(self, sequence: SequenceName) -> int:
        counters = await self._store.get(self.sequence_key, {})
        if not isinstance(counters, dict):
            counters = {}
        if sequence == "tasks":
            existing = [task.id for task in await self.load_tasks()]
        else:
            existing = [category.id for category in await self.load_categories()]
            # seeded ids are taken even once their categories are deleted
            if self._seed:
                existing.append(len(DEFAULT_CATEGORIES))
        current = max([int(counters.get(sequence, 0)), *existing], default=0)
        counters[sequence] = current + 1
        await self._store.set(self.sequence_key, counters)
        return counters[sequence]

    async def close(self) -> None:
        await self._store.close()


__all__ = ["DEFAULT_TTL_DAYS", "LocalStore", "PersistedStorage"]
