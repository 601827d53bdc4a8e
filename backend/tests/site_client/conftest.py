"""Shared fixtures for site client tests."""
from collections.abc import AsyncGenerator, Generator

import httpx
import pytest
import respx

from site_client.api_client import create_http_client
from site_client.config import ClientSettings
from site_client.storage import MemoryStorage, StorageEventBus
from site_client.tasks import TaskQueue

API_URL = "http://test/api"
START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms

    def advance_minutes(self, minutes: float) -> None:
        self.advance(int(minutes * 60 * 1000))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> ClientSettings:
    """Client settings with a short error display time and no .env lookup."""
    return ClientSettings(
        _env_file=None,
        api_url=API_URL,
        error_display_seconds=0.01,
    )


@pytest.fixture
def bus() -> StorageEventBus:
    return StorageEventBus()


@pytest.fixture
def storage(bus: StorageEventBus) -> MemoryStorage:
    return MemoryStorage(bus)


@pytest.fixture
def tasks() -> TaskQueue:
    return TaskQueue()


@pytest.fixture
def mock_api() -> Generator[respx.MockRouter]:
    """Mock the site API; requests to unmocked routes fail the test."""
    with respx.mock(base_url=API_URL, assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
async def http_client(
    mock_api: respx.MockRouter, settings: ClientSettings,
) -> AsyncGenerator[httpx.AsyncClient]:
    """API client created inside the respx context."""
    async with create_http_client(settings) as client:
        yield client


def envelope(data) -> dict:
    """Wrap data in the success envelope."""
    return {"success": True, "data": data}


def failure(message: str) -> dict:
    """Error envelope."""
    return {"success": False, "message": message}
