"""Enumerations shared across the Stress Tracker models."""

from __future__ import annotations

from enum import StrEnum


class ActionType(StrEnum):
    """Kinds of resolved actions recorded in the action log.

    Values match the persisted wire names.
    """

    INCREMENT = "increment"
    DECREMENT = "decrement"
    RESET = "reset"
    PANIC = "panic"
    DICE_ROLL = "diceRoll"
    PUSH_ROLL = "pushRoll"


class ActionLoss(StrEnum):
    """Actions a character forfeits because of a panic effect."""

    SLOW = "slow"
    ALL = "all"


__all__ = [
    "ActionType",
    "ActionLoss",
]
