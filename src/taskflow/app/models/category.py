"""Category domain models."""

from __future__ import annotations

from pydantic import Field

from .common import CamelModel

DEFAULT_CATEGORY_COLOR = "#1976D2"

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Work", "#1976D2"),
    ("Personal", "#4CAF50"),
    ("Shopping", "#9C27B0"),
    ("Health", "#FF9800"),
)


class Category(CamelModel):
    """A named, colored grouping for tasks.

    ``count`` is a cache owned by the count maintainer and is never taken
    from user input.
    """

    id: int
    name: str
    color: str = DEFAULT_CATEGORY_COLOR
    count: int = Field(default=0, ge=0)


def default_categories() -> list[Category]:
    """Return the categories a fresh store starts with, ids from 1."""
    return [
        Category(id=index, name=name, color=color, count=0)
        for index, (name, color) in enumerate(DEFAULT_CATEGORIES, start=1)
    ]


__all__ = ["Category", "DEFAULT_CATEGORIES", "DEFAULT_CATEGORY_COLOR", "default_categories"]
