"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Stress Tracker test suite.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
import structlog


if TYPE_CHECKING:
    from collections.abc import Generator


class ScriptedDiceSource:
    """Dice source that returns pre-scripted faces in order."""

    def __init__(self, faces: Iterable[int]) -> None:
        self.faces = deque(faces)
        self.drawn: list[int] = []

    def roll_d6(self) -> int:
        if not self.faces:
            raise AssertionError("Scripted dice source exhausted")
        face = self.faces.popleft()
        self.drawn.append(face)
        return face

    def roll_d6s(self, count: int) -> list[int]:
        return [self.roll_d6() for _ in range(count)]


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from stress_tracker.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog and root logger state after each test."""
    root_handlers = list(logging.getLogger().handlers)
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger().handlers[:] = root_handlers


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "STRESS_TRACKER_DEBUG": "true",
        "STRESS_TRACKER_LOG_LEVEL": "DEBUG",
        "STRESS_TRACKER_STORAGE_BACKEND": "sqlite",
        "STRESS_TRACKER_STORAGE_DATABASE_PATH": str(tmp_path / "env.db"),
        "STRESS_TRACKER_GAME_DICE_SEED": "42",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Dice Fixtures
# =============================================================================


@pytest.fixture
def scripted_dice() -> Callable[..., ScriptedDiceSource]:
    """Factory for dice sources that return the given faces in order.

    Returns:
        Callable taking the faces to return.
    """

    def factory(*faces: int) -> ScriptedDiceSource:
        return ScriptedDiceSource(faces)

    return factory


# =============================================================================
# Panic Table Fixtures
# =============================================================================


@pytest.fixture
def panic_table_data() -> dict[str, dict[str, Any]]:
    """Raw panic table with distinct effect names.

    Index 7 and 10 raise stress, 11 lowers it by one, 12 lowers it by
    three, and 13 has an effect on other characters only.
    """
    data: dict[str, dict[str, Any]] = {
        str(i): {"name": f"EFFECT {i}", "description": f"Effect number {i}."} for i in range(1, 16)
    }
    data["1"]["name"] = "KEEPING IT TOGETHER"
    data["7"] = {
        "name": "NERVOUS TWITCH",
        "description": "Stress increases by one for you and nearby friends.",
        "stressChange": 1,
        "otherStressChange": 1,
    }
    data["10"] = {
        "name": "FREEZE",
        "description": "Frozen for one round.",
        "stressChange": 1,
        "actionLoss": "slow",
    }
    data["11"] = {"name": "SEEK COVER", "description": "Find cover.", "stressChange": -1}
    data["12"] = {"name": "SCREAM", "description": "Scream.", "stressChange": -3}
    data["13"] = {
        "name": "FLEE",
        "description": "Run away.",
        "otherStressChange": 1,
        "actionLoss": "all",
        "notes": "No retreat roll.",
    }
    data["15"]["name"] = "CATATONIC"
    return data


@pytest.fixture
def panic_table(panic_table_data: dict[str, dict[str, Any]]) -> Any:
    """Validated PanicTable built from ``panic_table_data``."""
    from stress_tracker.models.panic import PanicTable

    return PanicTable.model_validate(panic_table_data)


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def memory_backend() -> Any:
    """Empty in-memory storage backend."""
    from stress_tracker.storage.backends import MemoryBackend

    return MemoryBackend()


@pytest.fixture
def sqlite_backend(tmp_path: Path) -> Any:
    """SQLite storage backend in a temporary directory."""
    from stress_tracker.storage.backends import SqliteBackend

    return SqliteBackend(tmp_path / "data" / "stress_tracker.db")


@pytest.fixture
def character_store(memory_backend: Any) -> Any:
    """Character binding on the in-memory backend."""
    from stress_tracker.models.character import DEFAULT_CHARACTER, Character
    from stress_tracker.storage.durable import DurableValue

    return DurableValue(memory_backend, "character", DEFAULT_CHARACTER, Character)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def make_engine(
    memory_backend: Any,
    panic_table: Any,
    scripted_dice: Callable[..., ScriptedDiceSource],
) -> Callable[..., Any]:
    """Factory for a CharacterEngine with a given starting character.

    Returns:
        Callable taking keyword character fields and the scripted faces.
    """
    from stress_tracker.engine.character import CharacterEngine
    from stress_tracker.models.character import DEFAULT_CHARACTER, Character
    from stress_tracker.storage.durable import DurableValue

    def factory(*faces: int, **character_fields: Any) -> Any:
        store = DurableValue(memory_backend, "character", DEFAULT_CHARACTER, Character)
        if character_fields:
            store.write(Character(**character_fields))
        return CharacterEngine(store, panic_table, scripted_dice(*faces))

    return factory


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that advances one second per call from a fixed start."""
    start = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    ticks = iter(range(10_000))

    def clock() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return clock


@pytest.fixture
def make_session(
    memory_backend: Any,
    panic_table: Any,
    scripted_dice: Callable[..., ScriptedDiceSource],
    fixed_clock: Callable[[], datetime],
) -> Callable[..., Any]:
    """Factory for a StressTrackerSession sharing one scripted source.

    Returns:
        Callable taking the scripted faces and optional character fields.
    """
    from stress_tracker.engine.action_log import ActionLog
    from stress_tracker.engine.character import CharacterEngine
    from stress_tracker.models.character import DEFAULT_CHARACTER, Character
    from stress_tracker.session import StressTrackerSession
    from stress_tracker.storage.durable import DurableValue

    def factory(*faces: int, **character_fields: Any) -> Any:
        source = scripted_dice(*faces)
        store = DurableValue(memory_backend, "character", DEFAULT_CHARACTER, Character)
        if character_fields:
            store.write(Character(**character_fields))
        engine = CharacterEngine(store, panic_table, source)
        return StressTrackerSession(engine, ActionLog(fixed_clock), source)

    return factory
