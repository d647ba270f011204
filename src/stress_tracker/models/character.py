"""Character model for the Stress Tracker.

The character is the single persisted record of the rules engine. It is
immutable; every mutation produces a new instance via ``model_copy``.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Character(BaseModel):
    """A tracked character.

    Serialized with camelCase keys (``hasNerveOfSteel``) so stored values
    stay compatible with records written by earlier clients. Records that
    predate the talent flag load with ``has_nerve_of_steel=False``.

    Attributes:
        name: Display name; empty until the player sets one.
        stress: Current stress level, never negative and uncapped.
        has_nerve_of_steel: Whether the Nerve of Steel talent applies.

    Example:
        >>> ripley = Character(name="Ellen Ripley", stress=3)
        >>> ripley.with_stress(ripley.stress + 1).stress
        4
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(default="", description="Character display name")
    stress: Annotated[int, Field(ge=0)] = Field(
        default=0,
        description="Current stress level",
    )
    has_nerve_of_steel: bool = Field(
        default=False,
        description="Nerve of Steel talent (-2 on panic rolls)",
    )

    def with_stress(self, stress: int) -> Character:
        """Return a copy with a new stress level, floored at zero."""
        return self.model_copy(update={"stress": max(0, stress)})

    def renamed(self, name: str) -> Character:
        """Return a fresh character for a new name.

        Stress resets to zero; the talent flag carries over.
        """
        return Character(name=name, stress=0, has_nerve_of_steel=self.has_nerve_of_steel)


DEFAULT_CHARACTER = Character()


__all__ = [
    "Character",
    "DEFAULT_CHARACTER",
]
