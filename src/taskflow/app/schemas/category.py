"""Category-related Pydantic schemas."""

from __future__ import annotations

from pydantic import ConfigDict, Field, field_validator, model_validator

from ..models import DEFAULT_CATEGORY_COLOR, CamelModel, Category

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"

CATEGORY_READ_EXAMPLE = {"id": 3, "name": "Shopping", "color": "#9C27B0", "count": 2}


class CategoryCreate(CamelModel):
    """Payload for creating a new category."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Errands", "color": "#FF9800"}},
    )

    name: str = Field(min_length=1, max_length=50)
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Category name is required.")
        return stripped


class CategoryUpdate(CamelModel):
    """Payload for renaming or recoloring a category."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)

    @field_validator("name", "color")
    @classmethod
    def _reject_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("Field cannot be null.")
        stripped = value.strip()
        if not stripped:
            raise ValueError("Field cannot be blank.")
        return stripped

    @model_validator(mode="after")
    def _ensure_payload_not_empty(self) -> "CategoryUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        return self

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller explicitly supplied."""
        return self.model_dump(exclude_unset=True)


class CategoryRead(Category):
    """Public representation of a category."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": CATEGORY_READ_EXAMPLE},
    )


__all__ = ["CategoryCreate", "CategoryRead", "CategoryUpdate"]
