"""Storage backends for task and category collections."""

from __future__ import annotations

import logging

from redis.asyncio import Redis

from ..core.config import Settings
from .base import SequenceName, StorageBackend
from .local import DEFAULT_TTL_DAYS, LocalStore, PersistedStorage
from .memory import InMemoryStorage

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> StorageBackend:
    """Construct the storage adapter selected by ``settings.storage_backend``."""

    if settings.storage_backend == "redis":
        client = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
        store = LocalStore(client, ttl_days=settings.storage_ttl_days)
        logger.info("Using persisted storage", extra={"key_prefix": settings.storage_key_prefix})
        return PersistedStorage(
            store,
            key_prefix=settings.storage_key_prefix,
            seed_default_categories=settings.seed_default_categories,
        )
    logger.info("Using in-memory storage")
    return InMemoryStorage(seed_default_categories=settings.seed_default_categories)


__all__ = [
    "DEFAULT_TTL_DAYS",
    "InMemoryStorage",
    "LocalStore",
    "PersistedStorage",
    "SequenceName",
    "StorageBackend",
    "build_storage",
]
