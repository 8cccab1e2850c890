from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment configuration for the depreciation API."""

    model_config = SettingsConfigDict(
        env_prefix="DUOTAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_title: str = "DuoTax Depreciation API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["Content-Type", "Authorization"])
    cors_allow_credentials: bool = True


_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Load settings lazily so tests can override them."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings
