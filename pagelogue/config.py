"""Configuration using Pydantic Settings for automatic env var support.

Every field can be overridden with a ``PAGELOGUE_`` prefixed environment
variable, e.g. ``PAGELOGUE_RETENTION_DAYS=90``, or the same assignment in
``$XDG_CONFIG_HOME/pagelogue/pagelogue.env``. Environment variables win.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagelogue.errors import ConfigError, UnsupportedFormatError
from pagelogue.paths import CONFIG_HOME, DATA_HOME
from pagelogue.types import ExportFormat
from pagelogue.version import __version__

# Local storage quota of a browser extension, which the persisted schema was sized for
DEFAULT_STORAGE_QUOTA = 5 * 1024 * 1024
DEFAULT_RETENTION_DAYS = 30


class Settings(BaseSettings):
    """Runtime settings for extraction, export and history storage."""

    db_path: Path = Field(default=DATA_HOME / "pagelogue.db")
    storage_quota_bytes: int = Field(default=DEFAULT_STORAGE_QUOTA, gt=0)
    retention_days: int = Field(default=DEFAULT_RETENTION_DAYS, ge=0)
    default_format: ExportFormat = ExportFormat.MARKDOWN
    user_agent: str = f"pagelogue/{__version__}"

    model_config = SettingsConfigDict(
        env_prefix="PAGELOGUE_",
        env_file=CONFIG_HOME / "pagelogue.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("db_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        return v

    @field_validator("default_format", mode="before")
    @classmethod
    def parse_format(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return ExportFormat.parse(v)
            except UnsupportedFormatError as exc:
                raise ValueError(str(exc)) from exc
        return v


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment plus explicit overrides."""
    try:
        return Settings(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


__all__ = ["DEFAULT_STORAGE_QUOTA", "DEFAULT_RETENTION_DAYS", "Settings", "load_settings", "get_settings"]
