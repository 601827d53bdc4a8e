"""Locally persisted copy of one server resource."""
import json
import logging
import uuid
from collections.abc import Callable
from typing import Generic, TypeVar

from .storage import LocalStorage, StorageError, StorageEvent
from .versions import Clock, now_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CachedResource(Generic[T]):
    """
    In-memory state of a resource mirrored to durable storage.

    Three storage keys per resource:
    - <name>_data: JSON-serialized data
    - <name>_version: version stamp of data ("" = never fetched)
    - <name>_last_version_check: epoch ms of the last reconciliation attempt

    version only changes together with data (replace). last_checked_at is used
    for debouncing and may advance on its own.

    Storage failures never reach the caller: reads fall back to defaults and
    writes leave the in-memory state as the source of truth.
    """

    def __init__(
        self,
        name: str,
        storage: LocalStorage,
        default_factory: Callable[[], T],
        *,
        origin: str | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self.name = name
        self.storage = storage
        # Identifies this instance's writes on the storage bus
        self.origin = origin or uuid.uuid4().hex
        self._default_factory = default_factory
        self._clock = clock
        self._unsubscribe: Callable[[], None] | None = None

        self.data: T = default_factory()
        self.version: str = ""
        self.last_checked_at: int = 0

        if storage.bus is not None:
            self._unsubscribe = storage.bus.subscribe(self._on_storage_event)

    @property
    def data_key(self) -> str:
        return f"{self.name}_data"

    @property
    def version_key(self) -> str:
        return f"{self.name}_version"

    @property
    def last_check_key(self) -> str:
        return f"{self.name}_last_version_check"

    def load_from_durable(self) -> None:
        """Read persisted data, version and last check time into memory."""
        try:
            raw_data = self.storage.get_item(self.data_key)
            raw_version = self.storage.get_item(self.version_key)
            raw_last_check = self.storage.get_item(self.last_check_key)
        except StorageError as e:
            logger.warning("Cannot load %s cache, using defaults: %s", self.name, e)
            return

        if raw_data is not None:
            try:
                self.data = self._decode(raw_data)
            except ValueError:
                # Data without a usable version would never be refetched
                logger.warning("Discarding malformed %s cache entry", self.name)
                self.data = self._default_factory()
                raw_version = None
        self.version = raw_version or ""
        self.last_checked_at = _parse_int(raw_last_check)
        logger.debug("Loaded %s cache version=%r", self.name, self.version)

    def persist(self) -> None:
        """Write data, version and last check time to durable storage."""
        try:
            serialized = json.dumps(self.data, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning("Cannot serialize %s cache: %s", self.name, e)
            return
        try:
            self.storage.set_item(self.data_key, serialized, origin=self.origin)
            self.storage.set_item(self.version_key, self.version, origin=self.origin)
            self.storage.set_item(
                self.last_check_key, str(self.last_checked_at), origin=self.origin,
            )
        except StorageError as e:
            logger.warning("Cannot persist %s cache: %s", self.name, e)

    def replace(self, data: T, version: str) -> None:
        """Set data and its version together and persist both."""
        self.data = data
        self.version = version
        self.persist()

    def touch_checked_now(self) -> None:
        """Record a reconciliation attempt at the current time."""
        self.last_checked_at = self._clock()
        self.persist()

    def clear(self) -> None:
        """Drop the cached copy, in memory and in storage."""
        self.data = self._default_factory()
        self.version = ""
        self.last_checked_at = 0
        try:
            for key in (self.data_key, self.version_key, self.last_check_key):
                self.storage.remove_item(key, origin=self.origin)
        except StorageError as e:
            logger.warning("Cannot clear %s cache: %s", self.name, e)

    def close(self) -> None:
        """Stop following changes made by other client instances."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _decode(self, raw: str) -> T:
        """Parse stored JSON, rejecting values not shaped like the default data."""
        value = json.loads(raw)
        expected = type(self._default_factory())
        if not isinstance(value, expected):
            raise ValueError(f"expected {expected.__name__}, got {type(value).__name__}")
        return value

    def _on_storage_event(self, event: StorageEvent) -> None:
        """Apply a change written by another client instance."""
        if event.origin == self.origin:
            return
        if event.key == self.data_key:
            if event.new_value is None:
                self.data = self._default_factory()
                return
            try:
                self.data = self._decode(event.new_value)
            except ValueError:
                logger.warning("Ignoring malformed external %s update", self.name)
        elif event.key == self.version_key:
            self.version = event.new_value or ""
        elif event.key == self.last_check_key:
            self.last_checked_at = _parse_int(event.new_value)


def _parse_int(value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0
