"""
Durable local key-value storage for the client cache.

Values are strings, like browser localStorage. Every write and removal is published
on a StorageEventBus tagged with the writer's origin, so several client instances
("tabs") sharing one storage can tell their own writes from external ones.
"""
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when durable storage cannot be read or written."""


@dataclass(frozen=True)
class StorageEvent:
    """
    A change to one storage key.

    new_value is None when the key was removed. origin identifies the client
    instance that made the change (None for anonymous writers).
    """

    key: str
    new_value: str | None
    origin: str | None = None


StorageListener = Callable[[StorageEvent], None]


class StorageEventBus:
    """In-process publish/subscribe channel for storage changes."""

    def __init__(self) -> None:
        self._listeners: list[StorageListener] = []

    def subscribe(self, listener: StorageListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: StorageEvent) -> None:
        """
        Deliver an event to every listener.

        A failing listener is logged and skipped - it must not break the writer
        or the remaining listeners.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Storage listener failed for key %s", event.key)

    @property
    def listener_count(self) -> int:
        """Number of registered listeners."""
        return len(self._listeners)


class LocalStorage(ABC):
    """
    String key-value storage that announces changes on an optional bus.

    Subclasses implement the raw _read/_write/_delete operations and raise
    StorageError on failure.
    """

    def __init__(self, bus: StorageEventBus | None = None) -> None:
        self.bus = bus

    @abstractmethod
    def _read(self, key: str) -> str | None: ...

    @abstractmethod
    def _write(self, key: str, value: str) -> None: ...

    @abstractmethod
    def _delete(self, key: str) -> None: ...

    def get_item(self, key: str) -> str | None:
        """Get the value stored under key, None if absent."""
        return self._read(key)

    def set_item(self, key: str, value: str, *, origin: str | None = None) -> None:
        """Store value under key and announce the change."""
        self._write(key, value)
        if self.bus is not None:
            self.bus.publish(StorageEvent(key=key, new_value=value, origin=origin))

    def remove_item(self, key: str, *, origin: str | None = None) -> None:
        """Remove key (no-op if absent) and announce the change."""
        self._delete(key)
        if self.bus is not None:
            self.bus.publish(StorageEvent(key=key, new_value=None, origin=origin))


class MemoryStorage(LocalStorage):
    """Storage kept in a dict - durable only for the life of the process."""

    def __init__(self, bus: StorageEventBus | None = None) -> None:
        super().__init__(bus)
        self._items: dict[str, str] = {}

    def _read(self, key: str) -> str | None:
        return self._items.get(key)

    def _write(self, key: str, value: str) -> None:
        self._items[key] = value

    def _delete(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage(LocalStorage):
    """
    Storage backed by a single JSON document on disk.

    The file is re-read on every access so separate processes sharing the path
    observe each other's writes. Writes go through a temp file and os.replace,
    so readers never see a half-written document. A malformed file reads as
    empty and is overwritten by the next write.
    """

    def __init__(self, path: Path | str, bus: StorageEventBus | None = None) -> None:
        super().__init__(bus)
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            logger.warning("Ignoring storage file %s that is not valid UTF-8", self.path)
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        try:
            items = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed storage file %s", self.path)
            return {}
        if not isinstance(items, dict):
            logger.warning("Ignoring storage file %s with non-object root", self.path)
            return {}
        return {str(k): v for k, v in items.items() if isinstance(v, str)}

    def _dump(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def _read(self, key: str) -> str | None:
        return self._load().get(key)

    def _write(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load()
            items[key] = value
            self._dump(items)

    def _delete(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if items.pop(key, None) is not None:
                self._dump(items)
