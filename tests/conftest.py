from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from taskflow.app.core.config import Settings
from taskflow.app.main import create_app
from taskflow.app.storage import InMemoryStorage


class FrozenClock:
    """Callable clock returning a fixed instant until advanced."""

    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, **kwargs: float) -> None:
        self.moment = self.moment + timedelta(**kwargs)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def settings() -> Settings:
    return Settings(environment="test")


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def app(settings: Settings, storage: InMemoryStorage) -> FastAPI:
    return create_app(settings=settings, storage=storage)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def redis_client() -> AsyncIterator[FakeRedis]:
    fake = FakeRedis(decode_responses=True)
    await fake.flushall()
    try:
        yield fake
    finally:
        await fake.flushall()
