"""Tests for the locally persisted resource cache."""
import json

from site_client.cache import CachedResource
from site_client.storage import LocalStorage, MemoryStorage, StorageError, StorageEventBus
from tests.site_client.conftest import START_MS, FakeClock


class FailingStorage(LocalStorage):
    """Storage whose every operation fails."""

    def _read(self, key: str) -> str | None:
        raise StorageError("quota exceeded")

    def _write(self, key: str, value: str) -> None:
        raise StorageError("quota exceeded")

    def _delete(self, key: str) -> None:
        raise StorageError("quota exceeded")


def make_cache(storage: LocalStorage, clock: FakeClock, **kwargs) -> CachedResource[list]:
    return CachedResource("todos", storage, list, clock=clock, **kwargs)


class TestLoadFromDurable:
    """Tests for reading the cache at startup."""

    def test_nothing_stored_uses_defaults(self, storage: MemoryStorage, clock: FakeClock) -> None:
        cache = make_cache(storage, clock)
        cache.load_from_durable()

        assert cache.data == []
        assert cache.version == ""
        assert cache.last_checked_at == 0

    def test_round_trip_through_storage(self, storage: MemoryStorage, clock: FakeClock) -> None:
        writer = make_cache(storage, clock)
        writer.replace([{"id": 1, "text": "café"}], "100")

        reader = make_cache(storage, clock)
        reader.load_from_durable()

        assert reader.data == [{"id": 1, "text": "café"}]
        assert reader.version == "100"

    def test_storage_keys(self, storage: MemoryStorage, clock: FakeClock) -> None:
        cache = make_cache(storage, clock)
        cache.replace([1], "100")
        cache.touch_checked_now()

        assert json.loads(storage.get_item("todos_data")) == [1]
        assert storage.get_item("todos_version") == "100"
        assert storage.get_item("todos_last_version_check") == str(START_MS)

    def test_malformed_data_discards_version(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        """Malformed data must not keep a version that would suppress the refetch."""
        storage.set_item("todos_data", "{broken")
        storage.set_item("todos_version", "100")

        cache = make_cache(storage, clock)
        cache.load_from_durable()

        assert cache.data == []
        assert cache.version == ""

    def test_wrongly_shaped_data_discards_version(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        """Valid JSON of the wrong type is discarded like malformed JSON."""
        storage.set_item("todos_data", "null")
        storage.set_item("todos_version", "100")

        cache = make_cache(storage, clock)
        cache.load_from_durable()

        assert cache.data == []
        assert cache.version == ""

    def test_malformed_last_check_is_zero(self, storage: MemoryStorage, clock: FakeClock) -> None:
        storage.set_item("todos_last_version_check", "soon")

        cache = make_cache(storage, clock)
        cache.load_from_durable()

        assert cache.last_checked_at == 0

    def test_unavailable_storage_uses_defaults(self, clock: FakeClock) -> None:
        cache = make_cache(FailingStorage(), clock)
        cache.load_from_durable()

        assert cache.data == []
        assert cache.version == ""


class TestWrites:
    """Tests for persisting changes."""

    def test_replace_sets_data_and_version_together(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        cache = make_cache(storage, clock)
        cache.replace(["a"], "200")

        assert cache.data == ["a"]
        assert cache.version == "200"

    def test_touch_checked_now_keeps_version(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        cache = make_cache(storage, clock)
        cache.replace(["a"], "200")
        clock.advance(5000)

        cache.touch_checked_now()

        assert cache.last_checked_at == START_MS + 5000
        assert cache.version == "200"

    def test_failed_write_keeps_memory_state(self, clock: FakeClock) -> None:
        """Storage failures are logged, the in-memory copy stays authoritative."""
        cache = make_cache(FailingStorage(), clock)

        cache.replace(["a"], "200")
        cache.touch_checked_now()
        cache.clear()

        assert cache.data == []
        assert cache.version == ""

    def test_clear_removes_keys(self, storage: MemoryStorage, clock: FakeClock) -> None:
        cache = make_cache(storage, clock)
        cache.replace(["a"], "200")

        cache.clear()

        assert cache.data == []
        assert cache.version == ""
        assert storage.get_item("todos_data") is None
        assert storage.get_item("todos_version") is None


class TestCrossInstanceSync:
    """Tests for instances sharing one storage and bus."""

    def test_other_instance_applies_changes(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        tab_a = make_cache(storage, clock)
        tab_b = make_cache(storage, clock)

        tab_a.replace([{"id": 1}], "300")

        assert tab_b.data == [{"id": 1}]
        assert tab_b.version == "300"
        assert tab_b.last_checked_at == tab_a.last_checked_at

    def test_own_writes_are_ignored(self, storage: MemoryStorage, clock: FakeClock) -> None:
        """An instance never re-applies its own write, so data keeps its identity."""
        cache = make_cache(storage, clock)
        data = [{"id": 1}]

        cache.replace(data, "300")

        assert cache.data is data

    def test_removal_resets_other_instance(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        tab_a = make_cache(storage, clock)
        tab_b = make_cache(storage, clock)
        tab_a.replace([1, 2], "300")

        tab_a.clear()

        assert tab_b.data == []
        assert tab_b.version == ""

    def test_close_stops_following(self, bus: StorageEventBus, clock: FakeClock) -> None:
        storage = MemoryStorage(bus)
        tab_a = make_cache(storage, clock)
        tab_b = make_cache(storage, clock)

        tab_b.close()
        tab_a.replace([1], "300")

        assert tab_b.data == []
        assert bus.listener_count == 1

    def test_malformed_external_data_ignored(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        cache = make_cache(storage, clock)
        cache.replace([1], "300")

        storage.set_item("todos_data", "{broken", origin="other")

        assert cache.data == [1]

    def test_wrongly_shaped_external_data_ignored(
        self, storage: MemoryStorage, clock: FakeClock,
    ) -> None:
        cache = make_cache(storage, clock)
        cache.replace([1], "300")

        storage.set_item("todos_data", '{"id": 1}', origin="other")

        assert cache.data == [1]
