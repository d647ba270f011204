"""Pydantic V2 domain models for the Stress Tracker.

Submodules:
    character: The persisted Character record.
    panic: Panic table, effects, and panic roll results.
    dice: Dice pool configuration and results.
    events: Stress events and action log entries.
    enums: Shared enumerations.
"""

from __future__ import annotations

from stress_tracker.models.character import DEFAULT_CHARACTER, Character
from stress_tracker.models.dice import (
    DiceRollConfig,
    DiceRollDetails,
    DiceRollResult,
    DieFace,
    KeptDice,
)
from stress_tracker.models.enums import ActionLoss, ActionType
from stress_tracker.models.events import ActionLogEntry, StressEvent
from stress_tracker.models.panic import (
    PanicEffect,
    PanicRollDetails,
    PanicRollResult,
    PanicTable,
)


__all__ = [
    # Enums
    "ActionType",
    "ActionLoss",
    # Character
    "Character",
    "DEFAULT_CHARACTER",
    # Panic
    "PanicEffect",
    "PanicTable",
    "PanicRollDetails",
    "PanicRollResult",
    # Dice
    "DieFace",
    "DiceRollConfig",
    "DiceRollResult",
    "KeptDice",
    "DiceRollDetails",
    # Events
    "StressEvent",
    "ActionLogEntry",
]
