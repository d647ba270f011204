"""Dice pool models for the Stress Tracker.

Models:
    DiceRollConfig: How many base and stress dice to roll.
    DiceRollResult: Faces rolled plus derived successes and panic flag.
    KeptDice: The sixes carried over when a roll is pushed.
    DiceRollDetails: A result annotated for the action log.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DieFace = Annotated[int, Field(ge=1, le=6)]
"""A single d6 face."""

_MODEL_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class DiceRollConfig(BaseModel):
    """Dice pool configuration.

    Attributes:
        base_dice: Number of base (attribute + skill) dice.
        stress_dice: Number of stress dice, usually the current stress.
    """

    model_config = _MODEL_CONFIG

    base_dice: Annotated[int, Field(ge=0)] = Field(default=0, description="Base dice count")
    stress_dice: Annotated[int, Field(ge=0)] = Field(default=0, description="Stress dice count")


class DiceRollResult(BaseModel):
    """Resolved dice pool.

    Attributes:
        base_dice_results: Faces of the base dice, in roll order.
        stress_dice_results: Faces of the stress dice, in roll order.
        successes: Number of sixes across both pools.
        panic_triggered: Whether an evaluated stress die showed a one.
        is_pushed: Whether this result came from a push.
    """

    model_config = _MODEL_CONFIG

    base_dice_results: tuple[DieFace, ...] = ()
    stress_dice_results: tuple[DieFace, ...] = ()
    successes: Annotated[int, Field(ge=0)] = 0
    panic_triggered: bool = False
    is_pushed: bool = False


class KeptDice(BaseModel):
    """Sixes kept from the previous roll during a push."""

    model_config = _MODEL_CONFIG

    base_dice: tuple[DieFace, ...] = ()
    stress_dice: tuple[DieFace, ...] = ()


class DiceRollDetails(DiceRollResult):
    """Dice result as recorded in the action log.

    Attributes:
        kept_dice: For pushed rolls, the sixes carried over unchanged.
    """

    kept_dice: KeptDice | None = None

    @classmethod
    def from_result(
        cls,
        result: DiceRollResult,
        *,
        kept_dice: KeptDice | None = None,
    ) -> DiceRollDetails:
        """Build log details from a roll result."""
        return cls(**result.model_dump(exclude={"kept_dice"}), kept_dice=kept_dice)


__all__ = [
    "DieFace",
    "DiceRollConfig",
    "DiceRollResult",
    "KeptDice",
    "DiceRollDetails",
]
