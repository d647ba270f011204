"""Raw key/value storage backends.

Backends store JSON text under string keys and fan every write out to
subscribed listeners, tagged with the writer's origin. Bindings use the
origin to tell their own writes apart from writes made by any other
binding sharing the backend (the equivalent of a browser ``storage``
event arriving from another tab).

Backends:
    MemoryBackend: In-process dictionary, with an optional byte quota.
    SqliteBackend: Single-table SQLite store.
"""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from stress_tracker.core.exceptions import StorageError, StorageQuotaExceededError
from stress_tracker.core.logging import get_logger


if TYPE_CHECKING:
    from stress_tracker.core.config import StorageSettings


logger = get_logger(__name__)

StorageListener = Callable[[str, "str | None", Any], None]
"""Called with ``(key, new_text, origin)``; ``new_text`` is None on removal."""


def _entry_size(key: str, text: str) -> int:
    return len(key.encode("utf-8")) + len(text.encode("utf-8"))


class StorageBackend(ABC):
    """Base class for raw text backends with change fan-out.

    Attributes:
        quota_bytes: Maximum summed size of keys and values, or None.
    """

    def __init__(self, *, quota_bytes: int | None = None) -> None:
        self.quota_bytes = quota_bytes
        self._listeners: list[StorageListener] = []

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored text for ``key``, or None if absent.

        Raises:
            StorageError: If the backend cannot be read.
        """

    @abstractmethod
    def _write(self, key: str, text: str) -> None: ...

    @abstractmethod
    def _delete(self, key: str) -> None: ...

    @abstractmethod
    def _used_bytes(self, *, exclude_key: str) -> int:
        """Size of everything stored except ``exclude_key``."""

    def set_item(self, key: str, text: str, *, origin: Any = None) -> None:
        """Store ``text`` under ``key`` and notify listeners.

        Args:
            key: Storage key.
            text: Serialized value.
            origin: Identity of the writer, passed through to listeners.

        Raises:
            StorageQuotaExceededError: If the write would exceed the quota.
            StorageError: If the backend write fails.
        """
        if self.quota_bytes is not None:
            projected = self._used_bytes(exclude_key=key) + _entry_size(key, text)
            if projected > self.quota_bytes:
                raise StorageQuotaExceededError(
                    "Storage quota exceeded",
                    key=key,
                    quota_bytes=self.quota_bytes,
                    details={"required_bytes": projected},
                )
        self._write(key, text)
        self._emit(key, text, origin)

    def remove_item(self, key: str, *, origin: Any = None) -> None:
        """Delete ``key`` and notify listeners with a None value."""
        self._delete(key)
        self._emit(key, None, origin)

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, key: str, text: str | None, origin: Any) -> None:
        """Deliver a change to every listener.

        A failing listener is logged and skipped; the write it observed
        has already been stored.
        """
        for listener in list(self._listeners):
            try:
                listener(key, text, origin)
            except Exception:
                logger.exception("Storage listener failed", key=key)


class MemoryBackend(StorageBackend):
    """In-process backend.

    Bindings attached to the same instance behave like browser tabs
    sharing one ``localStorage``.
    """

    def __init__(self, *, quota_bytes: int | None = None) -> None:
        super().__init__(quota_bytes=quota_bytes)
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def _write(self, key: str, text: str) -> None:
        self._items[key] = text

    def _delete(self, key: str) -> None:
        self._items.pop(key, None)

    def _used_bytes(self, *, exclude_key: str) -> int:
        return sum(_entry_size(k, v) for k, v in self._items.items() if k != exclude_key)

    def __len__(self) -> int:
        return len(self._items)


class SqliteBackend(StorageBackend):
    """SQLite key/value backend.

    One row per key in the ``kv_store`` table. Each operation opens its
    own connection, so several backends may point at one file; change
    notifications only reach listeners of the same backend instance.

    Database location defaults to ~/.stress_tracker/stress_tracker.db.
    """

    SCHEMA_VERSION = 1

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        quota_bytes: int | None = None,
    ) -> None:
        """Initialize the backend and its schema.

        Args:
            db_path: Path to database file. If None, uses default location.
            quota_bytes: Optional capacity in bytes.

        Raises:
            StorageError: If the database cannot be created.
        """
        super().__init__(quota_bytes=quota_bytes)
        if db_path is None:
            self.db_path = self._get_default_path()
        else:
            self.db_path = Path(db_path)

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("SQLite storage initialized", db_path=str(self.db_path))

    @staticmethod
    def _get_default_path() -> Path:
        return Path.home() / ".stress_tracker" / "stress_tracker.db"

    @contextmanager
    def _get_connection(self, key: str | None = None) -> Generator[sqlite3.Connection, None, None]:
        """Get a connection, translating sqlite errors into StorageError."""
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database: {exc}", key=key) from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Database operation failed: {exc}", key=key) from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            cursor.execute("""
                INSERT OR REPLACE INTO schema_version (version) VALUES (?)
            """, (self.SCHEMA_VERSION,))

    def get_item(self, key: str) -> str | None:
        with self._get_connection(key) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        return row[0] if row else None

    def _write(self, key: str, text: str) -> None:
        with self._get_connection(key) as conn:
            conn.execute("""
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """, (key, text))

    def _delete(self, key: str) -> None:
        with self._get_connection(key) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def _used_bytes(self, *, exclude_key: str) -> int:
        with self._get_connection(exclude_key) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key, value FROM kv_store WHERE key != ?", (exclude_key,))
            return sum(_entry_size(k, v) for k, v in cursor.fetchall())

    def keys(self) -> list[str]:
        """List stored keys in sorted order."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key FROM kv_store ORDER BY key")
            return [row[0] for row in cursor.fetchall()]


def create_backend(settings: StorageSettings) -> StorageBackend:
    """Build the backend selected in storage settings."""
    if settings.backend == "sqlite":
        return SqliteBackend(settings.database_path, quota_bytes=settings.quota_bytes)
    return MemoryBackend(quota_bytes=settings.quota_bytes)


__all__ = [
    "StorageListener",
    "StorageBackend",
    "MemoryBackend",
    "SqliteBackend",
    "create_backend",
]
