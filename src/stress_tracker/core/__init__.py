"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        StressTrackerError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        StorageError: Durable value store failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from stress_tracker.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from stress_tracker.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    GameEngineError,
    PanicTableError,
    PushNotAllowedError,
    StorageDecodeError,
    StorageError,
    StorageQuotaExceededError,
    StressTrackerError,
)
from stress_tracker.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "StressTrackerError",
    # Configuration exceptions
    "ConfigurationError",
    # Storage exceptions
    "StorageError",
    "StorageQuotaExceededError",
    "StorageDecodeError",
    # Game engine exceptions
    "GameEngineError",
    "DiceRollError",
    "PanicTableError",
    "PushNotAllowedError",
    # Configuration
    "Settings",
    "StorageSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
