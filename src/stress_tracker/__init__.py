"""Stress Tracker - Alien RPG stress and panic rules engine.

Tracks a character's stress level and resolves the two random subsystems
built on it: dice pool rolls (with a one-time push) and panic rolls
against a stress-indexed effect table.

ARCHITECTURE:
- The session owns one character engine and one action log
- Engine mutations return events; the session forwards them to the log
- Character state persists through a durable value binding
- All randomness comes from an injectable DiceSource

Example:
    >>> from stress_tracker import create_session, SeededDiceSource
    >>>
    >>> session = create_session(source=SeededDiceSource(seed=1))
    >>> session.update_name("Ellen Ripley")
    >>> session.increment_stress()
    >>> result = session.panic_roll()
    >>> print(result.roll, result.effect.name)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 domain models.
    storage: Durable value store backends and bindings.
    engine: Dice, character state, panic table, and action log.
    session: Session coordinator.
"""

from __future__ import annotations

# Core
from stress_tracker.core.config import Settings, get_settings
from stress_tracker.core.exceptions import StressTrackerError
from stress_tracker.core.logging import configure_logging, get_logger

# Models
from stress_tracker.models import (
    ActionLogEntry,
    ActionType,
    Character,
    DiceRollConfig,
    DiceRollResult,
    PanicEffect,
    PanicRollResult,
    PanicTable,
    StressEvent,
)

# Storage
from stress_tracker.storage import DurableValue, MemoryBackend, SqliteBackend

# Engine
from stress_tracker.engine import (
    ActionLog,
    CharacterEngine,
    DiceSource,
    SeededDiceSource,
    default_panic_table,
    push_roll,
    roll_dice,
)

# Session
from stress_tracker.session import StressTrackerSession, create_session


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "StressTrackerError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "ActionType",
    "ActionLogEntry",
    "Character",
    "DiceRollConfig",
    "DiceRollResult",
    "PanicEffect",
    "PanicRollResult",
    "PanicTable",
    "StressEvent",
    # Storage
    "DurableValue",
    "MemoryBackend",
    "SqliteBackend",
    # Engine
    "ActionLog",
    "CharacterEngine",
    "DiceSource",
    "SeededDiceSource",
    "default_panic_table",
    "roll_dice",
    "push_roll",
    # Session
    "StressTrackerSession",
    "create_session",
]
