"""Dice pool mechanics for the Alien RPG.

This module resolves d6 dice pools and pushes. The resolution functions
are pure: all randomness comes from a ``DiceSource`` passed in by the
caller, so tests and replays can script every face.

Rules:
    - Any die (base or stress) showing 6 is a success.
    - Panic triggers when a stress die shows 1; base dice never panic.
    - A push keeps every 6, re-rolls everything else, and adds one
      stress die. Only re-rolled and new stress dice can trigger panic.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from stress_tracker.core.constants import (
    DIE_FACES,
    PANIC_FACE,
    PUSH_EXTRA_STRESS_DICE,
    SUCCESS_FACE,
)
from stress_tracker.core.exceptions import DiceRollError
from stress_tracker.core.logging import get_logger
from stress_tracker.models.dice import DiceRollConfig, DiceRollResult, KeptDice


logger = get_logger(__name__)


@runtime_checkable
class DiceSource(Protocol):
    """Source of d6 faces."""

    def roll_d6(self) -> int:
        """Roll one d6."""
        ...

    def roll_d6s(self, count: int) -> list[int]:
        """Roll ``count`` d6, in order."""
        ...


class D20DiceSource:
    """Dice source backed by the d20 library.

    Example:
        >>> source = D20DiceSource()
        >>> faces = source.roll_d6s(3)
    """

    def roll_d6(self) -> int:
        return self.roll_d6s(1)[0]

    def roll_d6s(self, count: int) -> list[int]:
        """Roll ``count`` d6 through d20.

        Raises:
            DiceRollError: If the d20 library fails or is missing.
        """
        if count <= 0:
            return []
        expression = f"{count}d{DIE_FACES}"
        try:
            import d20

            result: d20.RollResult = d20.roll(expression)
        except ImportError as exc:
            raise DiceRollError(
                "d20 library not installed. Install with: pip install d20",
                expression=expression,
            ) from exc
        except Exception as exc:
            raise DiceRollError(f"Dice roll failed: {exc}", expression=expression) from exc
        return _check_faces(self._extract_dice_values(result.expr), expression)

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Extract individual kept dice values from a d20 expression tree."""
        import d20

        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values


class SeededDiceSource:
    """Deterministic dice source using a private ``random.Random``.

    Args:
        seed: Seed for the generator; two sources with the same seed
            produce the same faces.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)
        logger.info("Seeded dice source initialized", seed=seed)

    def roll_d6(self) -> int:
        return self._rng.randint(1, DIE_FACES)

    def roll_d6s(self, count: int) -> list[int]:
        return [self.roll_d6() for _ in range(max(0, count))]


def _check_faces(faces: Sequence[int], expression: str) -> list[int]:
    for face in faces:
        if not 1 <= face <= DIE_FACES:
            raise DiceRollError(
                f"Die face out of range: {face}",
                expression=expression,
                details={"face": face},
            )
    return list(faces)


def _draw(source: DiceSource, count: int) -> list[int]:
    if count <= 0:
        return []
    return _check_faces(source.roll_d6s(count), f"{count}d{DIE_FACES}")


def count_successes(faces: Sequence[int]) -> int:
    """Count dice showing the success face."""
    return sum(1 for face in faces if face == SUCCESS_FACE)


def has_panic(stress_faces: Sequence[int]) -> bool:
    """Check whether any of the given stress dice shows the panic face."""
    return any(face == PANIC_FACE for face in stress_faces)


def roll_dice(config: DiceRollConfig, source: DiceSource | None = None) -> DiceRollResult:
    """Roll a dice pool.

    Base dice are drawn before stress dice.

    Args:
        config: Number of base and stress dice.
        source: Dice source; defaults to the module-level d20 source.

    Returns:
        DiceRollResult with faces, successes and the panic flag.

    Raises:
        DiceRollError: If the source fails or returns an invalid face.
    """
    if source is None:
        source = get_default_source()
    base = _draw(source, config.base_dice)
    stress = _draw(source, config.stress_dice)

    result = DiceRollResult(
        base_dice_results=tuple(base),
        stress_dice_results=tuple(stress),
        successes=count_successes(base + stress),
        panic_triggered=has_panic(stress),
    )
    logger.info(
        "Dice rolled",
        base_dice=config.base_dice,
        stress_dice=config.stress_dice,
        successes=result.successes,
        panic=result.panic_triggered,
    )
    return result


def kept_dice(previous: DiceRollResult) -> KeptDice:
    """Dice a push would keep: every success face, per pool."""
    return KeptDice(
        base_dice=tuple(f for f in previous.base_dice_results if f == SUCCESS_FACE),
        stress_dice=tuple(f for f in previous.stress_dice_results if f == SUCCESS_FACE),
    )


def push_roll(previous: DiceRollResult, source: DiceSource | None = None) -> DiceRollResult:
    """Push a previous roll.

    Sixes stay in place; every other die is re-rolled in position. One
    new stress die is appended to the stress pool. Draw order is base
    re-rolls, then stress re-rolls, then the new stress die.

    This function does not track whether a roll was already pushed;
    callers enforce the one-push limit.

    Args:
        previous: The roll being pushed.
        source: Dice source; defaults to the module-level d20 source.

    Returns:
        A new DiceRollResult with ``is_pushed=True``.
    """
    if source is None:
        source = get_default_source()

    base_rerolls = iter(_draw(source, sum(1 for f in previous.base_dice_results if f != SUCCESS_FACE)))
    base = [f if f == SUCCESS_FACE else next(base_rerolls) for f in previous.base_dice_results]

    stress_rerolled = _draw(source, sum(1 for f in previous.stress_dice_results if f != SUCCESS_FACE))
    stress_iter = iter(stress_rerolled)
    stress = [f if f == SUCCESS_FACE else next(stress_iter) for f in previous.stress_dice_results]

    added = _draw(source, PUSH_EXTRA_STRESS_DICE)
    stress.extend(added)

    result = DiceRollResult(
        base_dice_results=tuple(base),
        stress_dice_results=tuple(stress),
        successes=count_successes(base + stress),
        panic_triggered=has_panic(stress_rerolled + added),
        is_pushed=True,
    )
    logger.info(
        "Roll pushed",
        kept=count_successes(previous.base_dice_results) + count_successes(previous.stress_dice_results),
        successes=result.successes,
        panic=result.panic_triggered,
    )
    return result


# Module-level convenience source
_default_source: DiceSource | None = None


def get_default_source() -> DiceSource:
    """Get the shared d20-backed dice source."""
    global _default_source  # noqa: PLW0603
    if _default_source is None:
        _default_source = D20DiceSource()
    return _default_source


__all__ = [
    "DiceSource",
    "D20DiceSource",
    "SeededDiceSource",
    "count_successes",
    "has_panic",
    "roll_dice",
    "push_roll",
    "kept_dice",
    "get_default_source",
]
