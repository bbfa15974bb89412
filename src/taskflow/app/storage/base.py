"""Storage backend interface shared by every adapter."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Literal

from ..models import Category, Task

SequenceName = Literal["tasks", "categories"]


class StorageBackend(ABC):
    """Persist task and category collections.

    Adapters hand out copies: mutating a returned model never changes stored
    state until it is written back with one of the ``save_*`` methods. Every
    mutating service operation holds :attr:`lock` for its whole
    read-modify-write cycle.
    """

    name: str = "abstract"

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        """Return the lock serialising mutations against this backend."""
        return self._lock

    @abstractmethod
    async def load_tasks(self) -> list[Task]:
        """Return every stored task."""

    @abstractmethod
    async def save_tasks(self, tasks: list[Task]) -> None:
        """Replace the stored task collection."""

    @abstractmethod
    async def load_categories(self) -> list[Category]:
        """Return every stored category."""

    @abstractmethod
    async def save_categories(self, categories: list[Category]) -> None:
        """Replace the stored category collection."""

    @abstractmethod
    async def next_id(self, sequence: SequenceName) -> int:
        """Return a fresh identifier, never handed out before by this store."""

    async def close(self) -> None:
        """Release any resources held by the backend."""
        return None


__all__ = ["SequenceName", "StorageBackend"]
