"""Storage module for Stress Tracker persistence.

Provides the durable value store:
- Raw text backends (in-memory and SQLite) with change fan-out
- Typed DurableValue bindings with error reporting
"""

from stress_tracker.storage.backends import (
    MemoryBackend,
    SqliteBackend,
    StorageBackend,
    StorageListener,
    create_backend,
)
from stress_tracker.storage.durable import DurableValue

__all__ = [
    "StorageBackend",
    "StorageListener",
    "MemoryBackend",
    "SqliteBackend",
    "create_backend",
    "DurableValue",
]
