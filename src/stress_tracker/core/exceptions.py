"""Custom exception hierarchy for the Stress Tracker rules engine.

All exceptions inherit from StressTrackerError, enabling unified error
handling at the application boundary while preserving domain-specific
context in the ``details`` mapping.

Storage failures are special: the durable value binding records them on
its ``error`` slot instead of raising them into caller logic.

Example:
    >>> from stress_tracker.core.exceptions import DiceRollError
    >>> raise DiceRollError("Die face out of range", expression="1d6")
"""

from __future__ import annotations

from typing import Any


class StressTrackerError(Exception):
    """Base exception for all Stress Tracker errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(StressTrackerError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage Domain Exceptions
# =============================================================================


class StorageError(StressTrackerError):
    """Base exception for durable value store failures.

    These are reported through ``DurableValue.error`` and never thrown
    into the caller's control flow.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error with key context.

        Args:
            message: Human-readable error description.
            key: The storage key involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if key:
            combined_details["key"] = key
        super().__init__(message, details=combined_details)


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the backend's capacity."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        quota_bytes: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if quota_bytes is not None:
            combined_details["quota_bytes"] = quota_bytes
        super().__init__(message, key=key, details=combined_details)


class StorageDecodeError(StorageError):
    """Raised when a stored or externally-notified payload cannot be parsed.

    Covers both malformed JSON and JSON that does not match the
    expected value shape.
    """


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(StressTrackerError):
    """Base exception for all rules engine errors."""


class DiceRollError(GameEngineError):
    """Raised when dice rolling operations fail.

    This occurs when the dice library fails or a dice source produces a
    face outside the d6 range.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class PanicTableError(GameEngineError):
    """Raised when a panic table is incomplete or malformed."""

    def __init__(
        self,
        message: str,
        *,
        index: int | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if index is not None:
            combined_details["index"] = index
        super().__init__(message, details=combined_details)


class PushNotAllowedError(GameEngineError):
    """Raised when a push is requested without an eligible roll.

    A roll may be pushed once, and only if it did not trigger panic.
    """


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
]
