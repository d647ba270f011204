"""Rules engine for the Stress Tracker.

Submodules:
    dice: Dice pool rolls and pushes with injectable dice sources
    character: Character state engine and the panic roll
    panic_table: Loading and validating panic tables
    action_log: Session-scoped history of resolved actions

Example:
    >>> from stress_tracker.engine import roll_dice, push_roll, SeededDiceSource
    >>> from stress_tracker.models import DiceRollConfig
    >>>
    >>> source = SeededDiceSource(seed=7)
    >>> result = roll_dice(DiceRollConfig(base_dice=4, stress_dice=2), source)
    >>> if not result.panic_triggered:
    ...     result = push_roll(result, source)
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from stress_tracker.engine.dice import (
    D20DiceSource,
    DiceSource,
    SeededDiceSource,
    count_successes,
    get_default_source,
    has_panic,
    kept_dice,
    push_roll,
    roll_dice,
)

# =============================================================================
# Panic Tables
# =============================================================================
from stress_tracker.engine.panic_table import (
    default_panic_table,
    load_panic_table,
    parse_panic_table,
)

# =============================================================================
# Character State
# =============================================================================
from stress_tracker.engine.character import (
    CharacterEngine,
    PanicOutcome,
)

# =============================================================================
# Action Log
# =============================================================================
from stress_tracker.engine.action_log import (
    ActionLog,
    Clock,
    utc_now,
)


__all__ = [
    # Dice Rolling
    "DiceSource",
    "D20DiceSource",
    "SeededDiceSource",
    "count_successes",
    "has_panic",
    "roll_dice",
    "push_roll",
    "kept_dice",
    "get_default_source",
    # Panic Tables
    "parse_panic_table",
    "load_panic_table",
    "default_panic_table",
    # Character State
    "CharacterEngine",
    "PanicOutcome",
    # Action Log
    "ActionLog",
    "Clock",
    "utc_now",
]
