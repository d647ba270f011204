"""Panic table loading.

The bundled table is the English Alien RPG panic table shipped as
package data. A custom table can be supplied as a JSON file with the
same shape: keys ``"1"`` to ``"15"`` mapping to effect objects.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib.resources import files
from pathlib import Path

from pydantic import ValidationError

from stress_tracker.core.exceptions import PanicTableError
from stress_tracker.core.logging import get_logger
from stress_tracker.models.panic import PanicTable


logger = get_logger(__name__)

BUNDLED_TABLE = "panic_table.json"


def parse_panic_table(text: str, *, source: str = "<string>") -> PanicTable:
    """Parse and validate panic table JSON.

    Args:
        text: JSON document.
        source: Where the text came from, for error context.

    Returns:
        A validated PanicTable.

    Raises:
        PanicTableError: If the JSON is malformed, an entry is invalid,
            or the table is incomplete.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PanicTableError(
            f"Panic table is not valid JSON: {exc}",
            details={"source": source},
        ) from exc
    try:
        return PanicTable.model_validate(raw)
    except ValidationError as exc:
        raise PanicTableError(
            f"Panic table has invalid entries: {exc.error_count()} error(s)",
            details={"source": source, "errors": [err["msg"] for err in exc.errors()]},
        ) from exc


def load_panic_table(path: str | Path | None = None) -> PanicTable:
    """Load a panic table from ``path``, or the bundled table.

    Raises:
        PanicTableError: If the file cannot be read or is invalid.
    """
    if path is None:
        return default_panic_table()
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PanicTableError(
            f"Cannot read panic table: {exc}",
            details={"source": str(path)},
        ) from exc
    table = parse_panic_table(text, source=str(path))
    logger.info("Panic table loaded", source=str(path))
    return table


@lru_cache(maxsize=1)
def default_panic_table() -> PanicTable:
    """The bundled English panic table."""
    text = files("stress_tracker").joinpath("data").joinpath(BUNDLED_TABLE).read_text(encoding="utf-8")
    return parse_panic_table(text, source=BUNDLED_TABLE)


__all__ = [
    "parse_panic_table",
    "load_panic_table",
    "default_panic_table",
]
