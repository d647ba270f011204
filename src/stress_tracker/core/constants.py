"""Rules constants for the Stress Tracker.

Alien RPG dice and panic constants, plus the storage keys used by the
durable value store.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Dice Constants
# =============================================================================

DIE_FACES: Final = 6
"""Every die in a pool is a d6."""

SUCCESS_FACE: Final = 6
"""A die showing this face counts as a success and is kept on a push."""

PANIC_FACE: Final = 1
"""A stress die showing this face triggers panic."""

PUSH_EXTRA_STRESS_DICE: Final = 1
"""Stress dice added to the pool when a roll is pushed."""

# =============================================================================
# Panic Constants
# =============================================================================

NERVE_OF_STEEL_MODIFIER: Final = -2
"""Panic roll modifier granted by the Nerve of Steel talent."""

PANIC_ROLL_FLOOR: Final = 1
"""Lowest possible final panic roll."""

PANIC_TABLE_MIN: Final = 1
PANIC_TABLE_MAX: Final = 15
"""Panic table indices; rolls above the maximum use the last entry."""

# =============================================================================
# Storage Keys
# =============================================================================

STORAGE_KEYS: Final = {
    "CHARACTER": "character",
}


__all__ = [
    "DIE_FACES",
    "SUCCESS_FACE",
    "PANIC_FACE",
    "PUSH_EXTRA_STRESS_DICE",
    "NERVE_OF_STEEL_MODIFIER",
    "PANIC_ROLL_FLOOR",
    "PANIC_TABLE_MIN",
    "PANIC_TABLE_MAX",
    "STORAGE_KEYS",
]
