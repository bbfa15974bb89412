"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal, Sequence

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ... import __version__ as package_version


def _resolve_project_dirs() -> tuple[Path, Path]:
    """Locate the package directory and the repository root above ``src/``."""

    current = Path(__file__).resolve()
    project_dir: Path | None = None
    for parent in current.parents:
        if parent.name == "taskflow":
            project_dir = parent
            break
    if project_dir is None:
        raise RuntimeError("Unable to determine package directory for taskflow.")
    repository_root = project_dir.parent.parent
    return project_dir, repository_root


PROJECT_DIR, REPOSITORY_ROOT = _resolve_project_dirs()

EnvironmentName = Literal["development", "test", "ci"]
StorageBackendName = Literal["memory", "redis"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "reload": True,
    },
    "test": {
        "log_level": "WARNING",
        "reload": False,
    },
    "ci": {
        "log_level": "INFO",
        "reload": False,
    },
}


class Settings(BaseSettings):
    """Runtime configuration for the TaskFlow service."""

    model_config = SettingsConfigDict(
        env_prefix="TASKFLOW_",
        env_file=(PROJECT_DIR / ".env", REPOSITORY_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "TaskFlow"
    environment: EnvironmentName = Field(default="development")
    api_prefix: str = Field(default="/api")
    version: str = Field(default=package_version)
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
    )
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000)
    log_level: str = Field(default="INFO")
    reload: bool = Field(default=True)

    storage_backend: StorageBackendName = Field(default="memory")
    redis_url: str = Field(default="redis://localhost:6379/0")
    storage_key_prefix: str = Field(default="taskflow")
    storage_ttl_days: int = Field(default=30)
    seed_default_categories: bool = Field(default=True)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        if not normalized:
            normalized = "development"
        return _ENVIRONMENT_ALIASES.get(normalized, "development")

    @field_validator("storage_backend", mode="before")
    @classmethod
    def _normalise_storage_backend(cls, value: object) -> str:
        if not isinstance(value, str) or not value.strip():
            return "memory"
        return value.strip().lower()

    @field_validator("storage_ttl_days", mode="before")
    @classmethod
    def _ensure_positive_ttl(cls, value: object) -> int:
        try:
            days = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 30
        return max(days, 1)

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _coerce_comma_separated(cls, value: object) -> list[str]:
        """Allow comma separated strings for CORS configuration."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Sequence):
            return [str(item) for item in value if str(item).strip()]
        return []

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()
