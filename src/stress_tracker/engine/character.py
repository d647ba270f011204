"""Character state engine.

Owns the live ``Character`` through a durable value binding and applies
the stress rules to it. Every mutation writes through to storage at once
and returns the ``StressEvent`` values it produced; forwarding those to
an action log is the caller's job.

Example:
    >>> engine = CharacterEngine(DurableValue(MemoryBackend(), "character", Character()),
    ...                          default_panic_table())
    >>> engine.increment_stress()
    [StressEvent(action=<ActionType.INCREMENT: 'increment'>, resulting_stress=1, ...)]
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from stress_tracker.core.constants import NERVE_OF_STEEL_MODIFIER, PANIC_ROLL_FLOOR
from stress_tracker.core.exceptions import StorageError
from stress_tracker.core.logging import get_logger
from stress_tracker.engine.dice import DiceSource, get_default_source
from stress_tracker.models.character import Character
from stress_tracker.models.enums import ActionType
from stress_tracker.models.events import StressEvent
from stress_tracker.models.panic import (
    PanicEffect,
    PanicRollDetails,
    PanicRollResult,
    PanicTable,
)
from stress_tracker.storage.durable import DurableValue


logger = get_logger(__name__)


@dataclass(frozen=True)
class PanicOutcome:
    """A panic roll result together with the events it produced.

    Attributes:
        result: Final roll and resolved effect.
        events: The ``panic`` event, followed by a ``from_panic`` stress
            change event when the effect alters the roller's stress.
    """

    result: PanicRollResult
    events: list[StressEvent] = field(default_factory=list)

    @property
    def roll(self) -> int:
        return self.result.roll

    @property
    def effect(self) -> PanicEffect:
        return self.result.effect


class CharacterEngine:
    """Stress rules for a single persisted character.

    Args:
        store: Binding that owns the persisted character.
        panic_table: Table used to resolve panic rolls.
        source: Dice source for panic rolls.
        nerve_of_steel_modifier: Panic modifier when the talent is set.
    """

    def __init__(
        self,
        store: DurableValue[Character],
        panic_table: PanicTable,
        source: DiceSource | None = None,
        *,
        nerve_of_steel_modifier: int = NERVE_OF_STEEL_MODIFIER,
    ) -> None:
        self._store = store
        self._panic_table = panic_table
        self._source = source if source is not None else get_default_source()
        self._nerve_of_steel_modifier = nerve_of_steel_modifier
        self._unsubscribe = store.on_external_change(self._on_external_change)

    @property
    def character(self) -> Character:
        """Current character state."""
        return self._store.read()

    @property
    def panic_table(self) -> PanicTable:
        return self._panic_table

    @property
    def storage_error(self) -> StorageError | None:
        """Most recent persistence failure, if any."""
        return self._store.error

    def _commit(self, character: Character) -> Character:
        self._store.write(character)
        return character

    def update_name(self, new_name: str) -> list[StressEvent]:
        """Start over with a new name.

        Stress resets to zero and the Nerve of Steel flag is kept. No
        event is produced; the caller clears its action log.
        """
        previous = self.character
        self._commit(previous.renamed(new_name))
        logger.info("Character renamed", old_name=previous.name, new_name=new_name)
        return []

    def increment_stress(self) -> list[StressEvent]:
        character = self._commit(self.character.with_stress(self.character.stress + 1))
        logger.info("Stress incremented", stress=character.stress)
        return [StressEvent(action=ActionType.INCREMENT, resulting_stress=character.stress)]

    def decrement_stress(self) -> list[StressEvent]:
        """Lower stress by one, never below zero.

        An event is produced on every call, including at zero.
        """
        character = self._commit(self.character.with_stress(self.character.stress - 1))
        logger.info("Stress decremented", stress=character.stress)
        return [StressEvent(action=ActionType.DECREMENT, resulting_stress=character.stress)]

    def reset_stress(self) -> list[StressEvent]:
        self._commit(self.character.with_stress(0))
        logger.info("Stress reset")
        return [StressEvent(action=ActionType.RESET, resulting_stress=0)]

    def toggle_nerve_of_steel(self) -> list[StressEvent]:
        current = self.character
        self._commit(current.model_copy(update={"has_nerve_of_steel": not current.has_nerve_of_steel}))
        logger.info("Nerve of Steel toggled", enabled=not current.has_nerve_of_steel)
        return []

    def panic_roll(self) -> PanicOutcome:
        """Roll on the panic table.

        The final roll is ``d6 + stress + modifier``, floored at 1; rolls
        past the end of the table use its last entry. If the effect has a
        non-zero ``stress_change``, it is applied (floored at zero) and
        reported as a separate ``from_panic`` event.

        Returns:
            PanicOutcome with the roll, effect, and produced events.
        """
        stress_before = self.character.stress
        die_roll = self._source.roll_d6()
        modifier = self._nerve_of_steel_modifier if self.character.has_nerve_of_steel else 0
        final_roll = max(PANIC_ROLL_FLOOR, die_roll + stress_before + modifier)
        effect = self._panic_table.lookup(final_roll)

        events = [
            StressEvent(
                action=ActionType.PANIC,
                resulting_stress=stress_before,
                panic_details=PanicRollDetails(
                    die_roll=die_roll,
                    stress_before=stress_before,
                    modifier=modifier,
                    final_roll=final_roll,
                    effect_name=effect.name,
                ),
            )
        ]
        logger.info(
            "Panic roll",
            die_roll=die_roll,
            stress=stress_before,
            modifier=modifier,
            final_roll=final_roll,
            effect=effect.name,
        )

        if effect.stress_change:
            character = self._commit(self.character.with_stress(stress_before + effect.stress_change))
            events.append(
                StressEvent(
                    action=ActionType.INCREMENT if effect.stress_change > 0 else ActionType.DECREMENT,
                    resulting_stress=character.stress,
                    from_panic=True,
                )
            )
            logger.info("Panic effect applied", stress_change=effect.stress_change, stress=character.stress)

        return PanicOutcome(result=PanicRollResult(roll=final_roll, effect=effect), events=events)

    def on_external_change(self, callback: Callable[[Character], None]) -> Callable[[], None]:
        """Register a callback for characters written by another context.

        By the time the callback runs, ``character`` already reflects
        the new value.
        """
        return self._store.on_external_change(callback)

    def _on_external_change(self, character: Character) -> None:
        logger.info("Character synced from another context", name=character.name, stress=character.stress)

    def close(self) -> None:
        """Stop following external changes and detach the binding."""
        self._unsubscribe()
        self._store.close()


__all__ = [
    "PanicOutcome",
    "CharacterEngine",
]
