"""Shared model base classes and timestamp utilities."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Render ``moment`` as an ISO-8601 string with millisecond precision.

    Naive values are treated as UTC, and UTC is written with a ``Z`` suffix
    (``2024-03-05T12:00:00.000Z``).
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    rendered = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date or date-time string, returning ``None`` if invalid."""
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip()
    if candidate.endswith(("Z", "z")):
        candidate = f"{candidate[:-1]}+00:00"
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


class CamelModel(BaseModel):
    """Base model serialising snake_case attributes under camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


__all__ = ["CamelModel", "parse_iso", "to_iso", "utcnow"]
