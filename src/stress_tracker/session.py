"""Session coordinator for the Stress Tracker.

``StressTrackerSession`` is the single owner of one character engine and
its action log. It forwards the events each engine call produces to the
log, clears the log when the character's identity changes, and tracks
which dice roll may still be pushed.

Example:
    >>> session = create_session()
    >>> session.update_name("Ellen Ripley")
    >>> session.increment_stress()
    >>> result = session.roll_dice(base_dice=5)
    >>> if session.can_push:
    ...     result = session.push_roll()
    >>> [entry.action for entry in session.entries]
"""

from __future__ import annotations

from collections.abc import Sequence

from stress_tracker.core.config import Settings, get_settings
from stress_tracker.core.constants import STORAGE_KEYS
from stress_tracker.core.exceptions import PushNotAllowedError, StorageError
from stress_tracker.core.logging import configure_logging, get_logger
from stress_tracker.engine.action_log import ActionLog, Clock, utc_now
from stress_tracker.engine.character import CharacterEngine
from stress_tracker.engine.dice import (
    DiceSource,
    SeededDiceSource,
    get_default_source,
    kept_dice,
    push_roll,
    roll_dice,
)
from stress_tracker.engine.panic_table import load_panic_table
from stress_tracker.models.character import DEFAULT_CHARACTER, Character
from stress_tracker.models.dice import DiceRollConfig, DiceRollDetails, DiceRollResult
from stress_tracker.models.enums import ActionType
from stress_tracker.models.events import ActionLogEntry, StressEvent
from stress_tracker.models.panic import PanicRollResult
from stress_tracker.storage.backends import StorageBackend, create_backend
from stress_tracker.storage.durable import DurableValue


logger = get_logger(__name__)


class StressTrackerSession:
    """Coordinates the character engine, dice engine, and action log.

    Args:
        engine: Character engine owning the persisted character.
        log: Action log for this session; a fresh one if omitted.
        source: Dice source for pool rolls and pushes.
    """

    def __init__(
        self,
        engine: CharacterEngine,
        log: ActionLog | None = None,
        source: DiceSource | None = None,
    ) -> None:
        self.engine = engine
        self.log = log if log is not None else ActionLog()
        self._source = source if source is not None else get_default_source()
        self._pushable: DiceRollResult | None = None
        self._name = engine.character.name
        self._unsubscribe = engine.on_external_change(self._on_external_change)
        self._logger = logger.bind(character=self._name)

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def character(self) -> Character:
        return self.engine.character

    @property
    def entries(self) -> tuple[ActionLogEntry, ...]:
        """Action log, most recent first."""
        return self.log.entries

    @property
    def can_push(self) -> bool:
        """Whether the last dice roll may still be pushed."""
        return self._pushable is not None

    @property
    def storage_error(self) -> StorageError | None:
        return self.engine.storage_error

    # -------------------------------------------------------------------------
    # Character operations
    # -------------------------------------------------------------------------

    def _dispatch(self, events: Sequence[StressEvent]) -> list[ActionLogEntry]:
        entries = [self.log.record(event) for event in events]
        for entry in entries:
            self._logger.debug(
                "Action dispatched",
                action=str(entry.action),
                stress=entry.resulting_stress,
            )
        return entries

    def _forget_character(self, name: str) -> None:
        self.log.clear_log()
        self._pushable = None
        self._name = name
        self._logger = logger.bind(character=name)

    def update_name(self, new_name: str) -> None:
        """Rename the character, resetting stress and the action log."""
        self.engine.update_name(new_name)
        self._forget_character(new_name)

    def increment_stress(self) -> None:
        self._dispatch(self.engine.increment_stress())

    def decrement_stress(self) -> None:
        self._dispatch(self.engine.decrement_stress())

    def reset_stress(self) -> None:
        self._dispatch(self.engine.reset_stress())

    def toggle_nerve_of_steel(self) -> None:
        self._dispatch(self.engine.toggle_nerve_of_steel())

    def panic_roll(self) -> PanicRollResult:
        """Roll on the panic table and log the roll and any stress change."""
        outcome = self.engine.panic_roll()
        self._dispatch(outcome.events)
        return outcome.result

    # -------------------------------------------------------------------------
    # Dice operations
    # -------------------------------------------------------------------------

    def roll_dice(self, base_dice: int, stress_dice: int | None = None) -> DiceRollResult:
        """Roll a dice pool and log it.

        Args:
            base_dice: Number of base dice.
            stress_dice: Number of stress dice; defaults to current stress.

        Returns:
            The roll result. It becomes pushable unless it panicked.
        """
        if stress_dice is None:
            stress_dice = self.character.stress
        result = roll_dice(DiceRollConfig(base_dice=base_dice, stress_dice=stress_dice), self._source)
        self.log.log_action(
            ActionType.DICE_ROLL,
            self.character.stress,
            dice_roll_details=DiceRollDetails.from_result(result),
        )
        self._pushable = None if result.panic_triggered else result
        self._logger.debug("Dice roll logged", pushable=self.can_push)
        return result

    def push_roll(self) -> DiceRollResult:
        """Push the last eligible roll.

        Raises:
            PushNotAllowedError: If there is no roll to push, it already
                was pushed, or it triggered panic.
        """
        previous = self._pushable
        if previous is None:
            self._logger.warning("Push refused")
            raise PushNotAllowedError("No pushable dice roll")
        result = push_roll(previous, self._source)
        self.log.log_action(
            ActionType.PUSH_ROLL,
            self.character.stress,
            dice_roll_details=DiceRollDetails.from_result(result, kept_dice=kept_dice(previous)),
        )
        self._pushable = None
        return result

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _on_external_change(self, character: Character) -> None:
        if character.name != self._name:
            self._logger.info("Character replaced externally", old_name=self._name, new_name=character.name)
            self._forget_character(character.name)

    def close(self) -> None:
        """Detach from storage; other sessions are unaffected."""
        self._unsubscribe()
        self.engine.close()
        self._logger.info("Session closed")


def create_session(
    settings: Settings | None = None,
    *,
    backend: StorageBackend | None = None,
    source: DiceSource | None = None,
    clock: Clock = utc_now,
) -> StressTrackerSession:
    """Build a session from application settings.

    Args:
        settings: Settings to use; defaults to ``get_settings()``.
        backend: Storage backend overriding the configured one.
        source: Dice source overriding the configured one.
        clock: Clock for action log timestamps.

    Logging is configured from ``settings`` first: ``debug`` forces the
    DEBUG level, otherwise ``log_level`` applies, and ``log_json``
    selects JSON output.

    Returns:
        A ready-to-use session bound to the character storage key.
    """
    settings = settings or get_settings()
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.log_json,
    )
    if backend is None:
        backend = create_backend(settings.storage)
    if source is None:
        if settings.game.dice_seed is not None:
            source = SeededDiceSource(settings.game.dice_seed)
        else:
            source = get_default_source()

    store = DurableValue(backend, STORAGE_KEYS["CHARACTER"], DEFAULT_CHARACTER, Character)
    engine = CharacterEngine(
        store,
        load_panic_table(settings.game.panic_table_path),
        source,
        nerve_of_steel_modifier=settings.game.nerve_of_steel_modifier,
    )
    logger.info(
        "Session created",
        app_name=settings.app_name,
        backend=type(backend).__name__,
        character=engine.character.name,
    )
    return StressTrackerSession(engine, ActionLog(clock), source)


__all__ = [
    "StressTrackerSession",
    "create_session",
]
