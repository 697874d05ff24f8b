"""
TaskFlow Settings.

Settings are loaded from environment variables prefixed with ``TASKFLOW_``
(and an optional ``.env`` file in the working directory).

Environment Variables:
    TASKFLOW_LOG_LEVEL            Logging level (default: INFO)
    TASKFLOW_STORE_BACKEND        'memory' or 'file' (default: file)
    TASKFLOW_DATA_PATH            JSON store path (default: .local/taskflow/store.json)
    TASKFLOW_DEFAULT_FILTER       Initial filter mode (default: all)
    TASKFLOW_DEFAULT_SORT         Initial sort key (default: dueDate)
    TASKFLOW_PASSWORD_ITERATIONS  PBKDF2 iterations for local accounts
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskflow_mcp.constants import FilterMode, SortKey


class Settings(BaseSettings):
    """Service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TASKFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Root logging level")
    store_backend: Literal["memory", "file"] = Field(
        default="file",
        description="Document store implementation",
    )
    data_path: Path = Field(
        default=Path(".local/taskflow/store.json"),
        description="JSON snapshot path used by the file store",
    )
    default_filter: FilterMode = Field(default=FilterMode.ALL)
    default_sort: SortKey = Field(default=SortKey.DUE_DATE)
    password_iterations: int = Field(default=200_000, ge=1_000)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (loaded once)."""
    return Settings()
