"""Tests for the site configuration store."""
import httpx
import pytest
import respx
from httpx import Response

from site_client.config import ClientSettings
from site_client.storage import MemoryStorage
from site_client.stores.config import ConfigStore
from site_client.tasks import TaskQueue
from tests.site_client.conftest import FakeClock, envelope, failure


def make_config(token: str | None = None) -> dict:
    return {
        "github_token": token,
        "preferences": {"theme": "dark"},
        "updated_at": "2026-01-01T00:00:00",
    }


@pytest.fixture
def store(
    http_client: httpx.AsyncClient,
    storage: MemoryStorage,
    tasks: TaskQueue,
    settings: ClientSettings,
    clock: FakeClock,
) -> ConfigStore:
    return ConfigStore(http_client, storage, tasks, settings, clock=clock)


async def test__fetch__exposes_token_and_preferences(
    store: ConfigStore, mock_api: respx.MockRouter,
) -> None:
    mock_api.get("/config").mock(return_value=Response(200, json=envelope(make_config("ghp_a"))))

    assert await store.fetch() is True

    assert store.github_token == "ghp_a"
    assert store.preferences == {"theme": "dark"}


async def test__defaults_before_fetch(store: ConfigStore) -> None:
    assert store.github_token == ""
    assert store.preferences == {}


async def test__update_github_token__posts_then_reloads(
    store: ConfigStore, mock_api: respx.MockRouter,
) -> None:
    post_route = mock_api.post("/config/github-token").mock(
        return_value=Response(200, json=envelope(make_config("ghp_new"))),
    )
    get_route = mock_api.get("/config").mock(
        return_value=Response(200, json=envelope(make_config("ghp_new"))),
    )

    assert await store.update_github_token("ghp_new") is True

    assert post_route.call_count == 1
    assert get_route.call_count == 1
    assert store.github_token == "ghp_new"


async def test__update_github_token__failure_returns_false(
    store: ConfigStore, mock_api: respx.MockRouter,
) -> None:
    mock_api.post("/config/github-token").mock(
        return_value=Response(422, json={"detail": "invalid"}),
    )

    assert await store.update_github_token("") is False
    assert store.github_token == ""


async def test__delete_github_token__reloads(
    store: ConfigStore, mock_api: respx.MockRouter,
) -> None:
    store.cache.replace(make_config("ghp_old"), "100")
    mock_api.delete("/config/github-token").mock(
        return_value=Response(200, json=envelope(make_config())),
    )
    mock_api.get("/config").mock(return_value=Response(200, json=envelope(make_config())))

    assert await store.delete_github_token() is True
    assert store.github_token == ""


async def test__delete_github_token__api_failure(
    store: ConfigStore, mock_api: respx.MockRouter,
) -> None:
    store.cache.replace(make_config("ghp_old"), "100")
    mock_api.delete("/config/github-token").mock(
        return_value=Response(200, json=failure("Not allowed")),
    )

    assert await store.delete_github_token() is False
    assert store.github_token == "ghp_old"
