"""Typed durable value bindings.

A ``DurableValue`` binds one logical value to one key of a storage
backend. It loads synchronously when bound, writes through on every
change, and follows writes made to the same key by other bindings.

Failures never propagate to the caller: they are logged and kept on the
``error`` slot, and the in-memory value is left as the caller set it
(writes) or as it last was (external changes).

Example:
    >>> backend = MemoryBackend()
    >>> counter = DurableValue(backend, "counter", 0)
    >>> counter.write(3)
    >>> DurableValue(backend, "counter", 0).read()
    3
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from stress_tracker.core.exceptions import StorageDecodeError, StorageError
from stress_tracker.core.logging import get_logger
from stress_tracker.storage.backends import StorageBackend


logger = get_logger(__name__)

T = TypeVar("T")


class DurableValue(Generic[T]):
    """A single persisted value with change notification.

    Attributes:
        key: Storage key the value is bound to.
        default: Value used when nothing valid is stored.
    """

    def __init__(
        self,
        backend: StorageBackend,
        key: str,
        default: T,
        value_type: Any = None,
    ) -> None:
        """Bind a value to ``key`` and load it.

        Args:
            backend: Storage backend to read from and write to.
            key: Storage key.
            default: Fallback when the key is absent or unparseable.
            value_type: Type to validate against; defaults to ``type(default)``.
        """
        self.key = key
        self.default = default
        self._backend = backend
        self._adapter: TypeAdapter[T] = TypeAdapter(
            value_type if value_type is not None else type(default)
        )
        self._error: StorageError | None = None
        self._callbacks: list[Callable[[T], None]] = []
        self._value: T = self._load()
        self._unsubscribe = backend.subscribe(self._handle_storage_event)

    @property
    def value(self) -> T:
        """The current in-memory value."""
        return self._value

    @property
    def error(self) -> StorageError | None:
        """The most recent storage failure, cleared by the next success."""
        return self._error

    def read(self) -> T:
        """Return the current value."""
        return self._value

    def write(self, value: T) -> None:
        """Set the value and persist it immediately.

        The in-memory value is updated even if persisting fails; the
        failure is recorded on ``error``.
        """
        self._value = value
        try:
            text = self._adapter.dump_json(value, by_alias=True).decode("utf-8")
            self._backend.set_item(self.key, text, origin=self)
        except PydanticSerializationError as exc:
            self._record_error(
                StorageError(f"Value is not serializable: {exc}", key=self.key),
                "Storage write failed",
            )
            return
        except StorageError as exc:
            self._record_error(exc, "Storage write failed")
            return
        self._error = None

    def on_external_change(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register a callback for values written by other bindings.

        The callback receives the newly parsed value. It is not invoked
        when the payload fails to parse. An exception raised by the
        callback is logged and does not reach the writing binding.

        Returns:
            A callable that removes the callback again.
        """
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def close(self) -> None:
        """Detach from the backend; no further external changes arrive."""
        self._unsubscribe()
        self._callbacks.clear()

    def _load(self) -> T:
        try:
            raw = self._backend.get_item(self.key)
        except StorageError as exc:
            self._record_error(exc, "Storage read failed")
            return self.default
        if raw is None:
            return self.default
        try:
            return self._decode(raw)
        except StorageDecodeError as exc:
            self._record_error(exc, "Stored value unreadable, using default")
            return self.default

    def _decode(self, raw: str) -> T:
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as exc:
            raise StorageDecodeError(
                f"Invalid stored value: {exc.error_count()} validation error(s)",
                key=self.key,
                details={"errors": [err["msg"] for err in exc.errors()]},
            ) from exc

    def _handle_storage_event(self, key: str, new_text: str | None, origin: Any) -> None:
        if key != self.key or origin is self or new_text is None:
            return
        try:
            value = self._decode(new_text)
        except StorageDecodeError as exc:
            self._record_error(exc, "External change unreadable, keeping current value")
            return
        self._value = value
        self._error = None
        logger.debug("External change applied", key=self.key)
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception:
                logger.exception("External change callback failed", key=self.key)

    def _record_error(self, exc: StorageError, event: str) -> None:
        self._error = exc
        logger.error(event, key=self.key, error=str(exc))


__all__ = [
    "DurableValue",
]
