"""Panic models for the Stress Tracker.

Models:
    PanicEffect: One row of the panic table.
    PanicTable: The full 1..15 lookup table, validated for completeness.
    PanicRollDetails: Audit record of a single panic roll.
    PanicRollResult: What a panic roll returns to the caller.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator
from pydantic.alias_generators import to_camel

from stress_tracker.core.constants import PANIC_ROLL_FLOOR, PANIC_TABLE_MAX, PANIC_TABLE_MIN
from stress_tracker.core.exceptions import PanicTableError
from stress_tracker.models.enums import ActionLoss


class PanicEffect(BaseModel):
    """A single panic table entry.

    Only ``stress_change`` affects the rolling character's own stress.
    The other optional fields are narrative or affect other characters
    and are surfaced to the caller untouched.

    Attributes:
        name: Short effect title.
        description: Rules text shown to the player.
        stress_change: Delta applied to the roller's stress.
        other_stress_change: Delta for friendly characters nearby.
        action_loss: Which actions the roller forfeits.
        notes: Additional narrative consequence.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(description="Effect title")
    description: str = Field(description="Effect rules text")
    stress_change: int | None = Field(default=None, description="Roller stress delta")
    other_stress_change: int | None = Field(
        default=None,
        description="Stress delta for nearby friendly characters",
    )
    action_loss: ActionLoss | None = Field(default=None, description="Forfeited actions")
    notes: str | None = Field(default=None, description="Extra consequence")


class PanicTable(RootModel[dict[str, PanicEffect]]):
    """Panic effects keyed by the strings ``"1"`` through ``"15"``.

    The table must be complete: every index in range present and no
    other keys. Rolls above the last index resolve to the last entry.

    Example:
        >>> table = PanicTable.model_validate(raw_json_dict)
        >>> table.lookup(21).name
        'CATATONIC'
    """

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_complete(self) -> PanicTable:
        """Ensure the table covers every index with no gaps or extras.

        Raises:
            PanicTableError: If an index is missing or unexpected.
        """
        expected = {str(i) for i in range(PANIC_TABLE_MIN, PANIC_TABLE_MAX + 1)}
        missing = sorted(expected - self.root.keys(), key=int)
        if missing:
            raise PanicTableError(
                "Panic table is missing entries",
                index=int(missing[0]),
                details={"missing": [int(k) for k in missing]},
            )
        unexpected = sorted(self.root.keys() - expected)
        if unexpected:
            raise PanicTableError(
                "Panic table has unexpected keys",
                index=unexpected[0],
                details={"unexpected": unexpected},
            )
        return self

    def lookup(self, roll: int) -> PanicEffect:
        """Get the effect for a final panic roll.

        Args:
            roll: The final (already floored) panic roll.

        Returns:
            The effect at ``min(roll, 15)``.

        Raises:
            PanicTableError: If the roll is below the table's first index.
        """
        if roll < PANIC_TABLE_MIN:
            raise PanicTableError("Panic roll below table range", index=roll)
        return self.root[str(min(roll, PANIC_TABLE_MAX))]

    def __getitem__(self, key: str) -> PanicEffect:
        return self.root[key]

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(sorted(self.root, key=int))

    def __len__(self) -> int:
        return len(self.root)


class PanicRollDetails(BaseModel):
    """Audit details for one panic roll.

    Attributes:
        die_roll: The raw d6.
        stress_before: Stress at the moment of the roll.
        modifier: Talent modifier applied.
        final_roll: ``max(1, die_roll + stress_before + modifier)``.
        effect_name: Name of the resolved effect.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    die_roll: Annotated[int, Field(ge=1, le=6)]
    stress_before: Annotated[int, Field(ge=0)]
    modifier: int
    final_roll: Annotated[int, Field(ge=PANIC_ROLL_FLOOR)]
    effect_name: str


class PanicRollResult(BaseModel):
    """Outcome of a panic roll returned to the caller."""

    model_config = ConfigDict(frozen=True)

    roll: Annotated[int, Field(ge=PANIC_ROLL_FLOOR)]
    effect: PanicEffect


__all__ = [
    "PanicEffect",
    "PanicTable",
    "PanicRollDetails",
    "PanicRollResult",
]
