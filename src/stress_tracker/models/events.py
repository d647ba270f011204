"""Stress events and action log entries.

Engine mutations do not write to the action log themselves; they return
``StressEvent`` values that a dispatcher forwards to the log, where each
becomes an ``ActionLogEntry`` stamped with a timestamp.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stress_tracker.models.dice import DiceRollDetails
from stress_tracker.models.enums import ActionType
from stress_tracker.models.panic import PanicRollDetails


class StressEvent(BaseModel):
    """Tagged outcome of a single resolved action.

    Attributes:
        action: What happened.
        resulting_stress: Character stress after the action.
        panic_details: Present for panic rolls.
        dice_roll_details: Present for dice and push rolls.
        from_panic: True for stress changes caused by a panic effect.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    action: ActionType
    resulting_stress: Annotated[int, Field(ge=0)]
    panic_details: PanicRollDetails | None = None
    dice_roll_details: DiceRollDetails | None = None
    from_panic: bool | None = None


class ActionLogEntry(StressEvent):
    """An immutable, timestamped action log entry.

    Attributes:
        timestamp: ISO-8601 time the entry was appended.
    """

    timestamp: str = Field(description="ISO-8601 timestamp")


__all__ = [
    "StressEvent",
    "ActionLogEntry",
]
