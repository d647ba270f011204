"""Configuration management for the Stress Tracker.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime configuration overrides.

Example:
    >>> from stress_tracker.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.storage.backend)
    'memory'

Environment Variables:
    STRESS_TRACKER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    STRESS_TRACKER_LOG_JSON: Emit JSON log lines instead of console output
    STRESS_TRACKER_STORAGE_BACKEND: Durable store backend ('memory' or 'sqlite')
    STRESS_TRACKER_STORAGE_DATABASE_PATH: Path to the SQLite database file
    STRESS_TRACKER_STORAGE_QUOTA_BYTES: Optional capacity of the store
    STRESS_TRACKER_GAME_PANIC_TABLE_PATH: JSON panic table overriding the bundled one
    STRESS_TRACKER_GAME_DICE_SEED: Seed for deterministic dice
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stress_tracker.core.constants import NERVE_OF_STEEL_MODIFIER
from stress_tracker.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the durable value store.

    Attributes:
        backend: Which storage backend to bind values to.
        database_path: Path to the SQLite database file.
        quota_bytes: Optional capacity; writes beyond it fail.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRESS_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: Literal["memory", "sqlite"] = Field(
        default="memory",
        description="Durable value store backend",
    )
    database_path: Path = Field(
        default_factory=lambda: Path.home() / ".stress_tracker" / "stress_tracker.db",
        description="Path to SQLite database",
    )
    quota_bytes: int | None = Field(
        default=None,
        gt=0,
        description="Maximum stored bytes (keys plus values)",
    )


class GameSettings(BaseSettings):
    """Configuration for rules engine behavior.

    Attributes:
        panic_table_path: JSON file overriding the bundled panic table.
        dice_seed: Seed for reproducible dice; None uses the d20 library.
        nerve_of_steel_modifier: Panic roll modifier for the talent.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRESS_TRACKER_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    panic_table_path: Path | None = Field(
        default=None,
        description="Custom panic table JSON file",
    )
    dice_seed: int | None = Field(
        default=None,
        description="Seed for deterministic dice rolls",
    )
    nerve_of_steel_modifier: int = Field(
        default=NERVE_OF_STEEL_MODIFIER,
        le=0,
        description="Panic roll modifier granted by Nerve of Steel",
    )

    @field_validator("panic_table_path", mode="after")
    @classmethod
    def ensure_table_exists(cls, value: Path | None) -> Path | None:
        """Reject a configured panic table path that does not exist.

        Raises:
            ConfigurationError: If the file is missing.
        """
        if value is not None and not value.is_file():
            raise ConfigurationError(
                f"Panic table file not found: {value}",
                config_key="panic_table_path",
            )
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Emit JSON logs.
        storage: Durable store settings.
        game: Rules engine settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="STRESS_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Stress Tracker",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    game: GameSettings = Field(default_factory=GameSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
