"""Tests for durable storage and the storage event bus."""
from pathlib import Path

import pytest

from site_client.cache import CachedResource
from site_client.storage import (
    JsonFileStorage,
    MemoryStorage,
    StorageError,
    StorageEvent,
    StorageEventBus,
)


class TestStorageEventBus:
    """Tests for storage change notifications."""

    def test_set_and_remove_publish_events(self) -> None:
        bus = StorageEventBus()
        events: list[StorageEvent] = []
        bus.subscribe(events.append)
        storage = MemoryStorage(bus)

        storage.set_item("k", "v", origin="tab-1")
        storage.remove_item("k", origin="tab-2")

        assert events == [
            StorageEvent(key="k", new_value="v", origin="tab-1"),
            StorageEvent(key="k", new_value=None, origin="tab-2"),
        ]

    def test_unsubscribe(self) -> None:
        bus = StorageEventBus()
        events: list[StorageEvent] = []
        unsubscribe = bus.subscribe(events.append)

        unsubscribe()
        unsubscribe()  # second call is a no-op
        MemoryStorage(bus).set_item("k", "v")

        assert events == []
        assert bus.listener_count == 0

    def test_failing_listener_does_not_block_others(self) -> None:
        bus = StorageEventBus()
        received: list[str] = []

        def broken(_event: StorageEvent) -> None:
            raise RuntimeError("boom")

        bus.subscribe(broken)
        bus.subscribe(lambda event: received.append(event.key))

        MemoryStorage(bus).set_item("k", "v")

        assert received == ["k"]

    def test_storage_without_bus(self) -> None:
        storage = MemoryStorage()
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"


class TestJsonFileStorage:
    """Tests for the file-backed storage."""

    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "cache.json")
        assert storage.get_item("anything") is None

    def test_values_shared_between_instances(self, tmp_path: Path) -> None:
        """A second instance on the same path sees the first one's writes."""
        path = tmp_path / "nested" / "cache.json"
        JsonFileStorage(path).set_item("todos_version", "123")

        assert JsonFileStorage(path).get_item("todos_version") == "123"

    def test_remove_item(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "cache.json")
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.remove_item("a")
        storage.remove_item("missing")

        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_malformed_file_reads_empty_and_is_overwritten(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.json"
        path.write_text("{not json", encoding="utf-8")
        storage = JsonFileStorage(path)

        assert storage.get_item("k") is None
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"

    def test_non_object_root_reads_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.json"
        path.write_text('["a", "b"]', encoding="utf-8")
        assert JsonFileStorage(path).get_item("a") is None

    def test_unusable_path_raises_storage_error(self, tmp_path: Path) -> None:
        """A path below a regular file can be neither read nor written."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        storage = JsonFileStorage(blocker / "cache.json")

        with pytest.raises(StorageError):
            storage.set_item("k", "v")
        with pytest.raises(StorageError):
            storage.get_item("k")

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "cache.json")
        storage.set_item("k", "v")
        storage.set_item("k", "w")

        assert [p.name for p in tmp_path.iterdir()] == ["cache.json"]

    def test_invalid_utf8_file_reads_empty(self, tmp_path: Path) -> None:
        """A file that is not valid UTF-8 is treated like a malformed one."""
        path = tmp_path / "cache.json"
        path.write_bytes(b'{"todos_version": "\xff\xfe"}')
        storage = JsonFileStorage(path)

        assert storage.get_item("todos_version") is None

        cache = CachedResource("todos", storage, list)
        cache.load_from_durable()

        assert cache.data == []
        assert cache.version == ""
