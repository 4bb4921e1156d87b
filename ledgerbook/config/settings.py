"""
Configuration Management for Ledgerbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage keys, export formats and display labels live in one place so the
engine never hardcodes an environment-specific value.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    backend: Literal["memory", "json_file"] = Field(
        default="json_file",
        description="Which key-value backend to persist to"
    )
    path: str = Field(
        default=".ledgerbook/store.json",
        description="File used by the json_file backend"
    )

    # Schema keys - one per collection
    books_key: str = Field(
        default="app-books-v1",
        description="Key holding the JSON array of books"
    )
    categories_key: str = Field(
        default="app-categories-v1",
        description="Key holding the JSON array of categories"
    )

    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a file write before giving up"
    )

    @field_validator('books_key', 'categories_key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Storage keys must be non-empty."""
        if not v.strip():
            raise ValueError("Storage key cannot be empty")
        return v.strip()


class ExportSettings(BaseSettings):
    """CSV export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_EXPORT_",
        extra="ignore"
    )

    # %x / %X follow the process locale
    date_format: str = Field(
        default="%x",
        description="strftime format for the Date column"
    )
    time_format: str = Field(
        default="%X",
        description="strftime format for the Time column"
    )
    escape_quotes: bool = Field(
        default=False,
        description="Double embedded quote characters in quoted fields"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    # Display
    group_label_format: str = Field(
        default="%a, %d %b %Y",
        description="strftime format of the day headings in grouped views"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only allow standard logging levels."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
