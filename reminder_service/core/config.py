"""Configuration management for the reminder service."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

MAX_ID = 1_000_000


class Settings(BaseModel):
    """Application configuration loaded from environment variables."""

    app_env: str = "dev"
    database_url: str = "sqlite:///./reminders.db"
    cors_origins: list[str] = Field(default_factory=list)
    version: str = "0.1.0"
    log_level: str = "INFO"
    max_id: int = Field(default=MAX_ID, gt=0)
    api_tokens: dict[str, int] = Field(default_factory=dict)
    strict_query_type: bool = False

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            if not value:
                return []
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if isinstance(value, list):
            return value
        return []

    @field_validator("api_tokens", mode="before")
    @classmethod
    def assemble_api_tokens(cls, value: Any) -> dict[str, int]:
        """Parse ``token:account_id`` pairs separated by commas."""
        if isinstance(value, dict):
            return value
        if not isinstance(value, str) or not value.strip():
            return {}
        tokens: dict[str, int] = {}
        for entry in value.split(","):
            token, separator, account_id = entry.strip().rpartition(":")
            if not separator or not token or not account_id.strip().isdigit():
                msg = f"Invalid API token entry: {entry.strip()!r}"
                raise ValueError(msg)
            tokens[token] = int(account_id)
        return tokens

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def async_database_url(self) -> str:
        if self.database_url.startswith("sqlite+aiosqlite://"):
            return self.database_url
        if self.database_url.startswith("sqlite:///"):
            return self.database_url.replace("sqlite:///", "sqlite+aiosqlite:///")
        if self.database_url.startswith("sqlite://"):
            return self.database_url.replace("sqlite://", "sqlite+aiosqlite://")
        return self.database_url


def _build_settings() -> Settings:
    raw_values: dict[str, Any] = {
        "app_env": os.getenv("APP_ENV"),
        "database_url": os.getenv("DATABASE_URL"),
        "cors_origins": os.getenv("CORS_ORIGINS"),
        "version": os.getenv("APP_VERSION"),
        "log_level": os.getenv("LOG_LEVEL"),
        "max_id": os.getenv("MAX_ID"),
        "api_tokens": os.getenv("API_TOKENS"),
        "strict_query_type": os.getenv("STRICT_QUERY_TYPE"),
    }
    filtered_values = {key: value for key, value in raw_values.items() if value is not None}
    return Settings(**filtered_values)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return _build_settings()
