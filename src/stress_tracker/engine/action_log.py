"""Session-scoped action log.

Append-only, in memory only. Entries are kept in insertion order and
exposed newest first.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from stress_tracker.core.logging import get_logger
from stress_tracker.models.dice import DiceRollDetails
from stress_tracker.models.enums import ActionType
from stress_tracker.models.events import ActionLogEntry, StressEvent
from stress_tracker.models.panic import PanicRollDetails


logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ActionLog:
    """History of resolved actions for the current character.

    Args:
        clock: Returns the time used to stamp new entries.

    Example:
        >>> log = ActionLog()
        >>> _ = log.log_action(ActionType.INCREMENT, 1)
        >>> log.entries[0].resulting_stress
        1
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._entries: list[ActionLogEntry] = []

    @property
    def entries(self) -> tuple[ActionLogEntry, ...]:
        """All entries, most recent first."""
        return tuple(reversed(self._entries))

    def log_action(
        self,
        action: ActionType,
        resulting_stress: int,
        panic_details: PanicRollDetails | None = None,
        from_panic: bool | None = None,
        dice_roll_details: DiceRollDetails | None = None,
    ) -> ActionLogEntry:
        """Append an entry stamped with the current time.

        Returns:
            The appended entry.
        """
        entry = ActionLogEntry(
            timestamp=self._clock().isoformat(),
            action=action,
            resulting_stress=resulting_stress,
            panic_details=panic_details,
            dice_roll_details=dice_roll_details,
            from_panic=from_panic,
        )
        self._entries.append(entry)
        logger.debug("Action logged", action=str(action), stress=resulting_stress)
        return entry

    def record(self, event: StressEvent) -> ActionLogEntry:
        """Append an entry for an engine event."""
        return self.log_action(
            event.action,
            event.resulting_stress,
            panic_details=event.panic_details,
            from_panic=event.from_panic,
            dice_roll_details=event.dice_roll_details,
        )

    def clear_log(self) -> None:
        self._entries.clear()
        logger.debug("Action log cleared")

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "Clock",
    "utc_now",
    "ActionLog",
]
