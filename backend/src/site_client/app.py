"""
Client facade wiring storage, HTTP clients, stores and the navigation hook.

Usage:
    async with SiteClient() as site:
        site.start()              # render from cache, reconcile in background
        site.navigate("/todo", "/")
"""
import logging
import uuid
from typing import Self

import httpx

from .api_client import create_http_client
from .config import ClientSettings, get_client_settings
from .navigation import NavigationTrigger
from .reconcile import ReconcileOutcome
from .storage import JsonFileStorage, LocalStorage, MemoryStorage, StorageEventBus
from .stores import ConfigStore, ProfileStore, ProjectStore, TodoStore
from .stores.base import ResourceStore
from .stores.projects import create_github_client
from .tasks import TaskQueue
from .versions import Clock, now_ms

logger = logging.getLogger(__name__)


class SiteClient:
    """
    One client instance (the equivalent of a browser tab).

    Instances sharing a storage object and its bus keep their caches in sync:
    a write by one is applied by the others, never by itself.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        storage: LocalStorage | None = None,
        http_client: httpx.AsyncClient | None = None,
        github_client: httpx.AsyncClient | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self.settings = settings or get_client_settings()
        self.storage = storage or self._create_storage(self.settings)
        self.origin = uuid.uuid4().hex

        self._owns_http_client = http_client is None
        self.http_client = http_client or create_http_client(self.settings)
        self._owns_github_client = github_client is None
        self.github_client = github_client or create_github_client(self.settings)

        self.tasks = TaskQueue()
        store_kwargs = {"origin": self.origin, "clock": clock}
        self.profile = ProfileStore(
            self.http_client, self.storage, self.tasks, self.settings, **store_kwargs,
        )
        self.todos = TodoStore(
            self.http_client, self.storage, self.tasks, self.settings, **store_kwargs,
        )
        self.config = ConfigStore(
            self.http_client, self.storage, self.tasks, self.settings, **store_kwargs,
        )
        self.projects = ProjectStore(
            self.github_client, self.storage, self.settings, **store_kwargs,
        )
        self.navigation = NavigationTrigger(self.reconciled_stores, self.tasks)

    @staticmethod
    def _create_storage(settings: ClientSettings) -> LocalStorage:
        bus = StorageEventBus()
        if settings.storage_path is not None:
            return JsonFileStorage(settings.storage_path, bus)
        return MemoryStorage(bus)

    @property
    def reconciled_stores(self) -> list[ResourceStore]:
        """Stores kept fresh through the version endpoint."""
        return [self.profile, self.todos, self.config]

    def start(self) -> int:
        """
        Load every cache from storage, then schedule a version check of each.

        Cached data is available as soon as this returns. Must be called from
        a running event loop. Returns the number of scheduled checks.
        """
        for store in self.reconciled_stores:
            store.init_from_local()
        self.projects.init_from_local()
        logger.info("Site client started (api_url=%s)", self.settings.api_url)
        return self.navigation.schedule_checks()

    def navigate(self, to_path: str, from_path: str | None) -> int:
        """Report a completed navigation. Returns the number of scheduled checks."""
        return self.navigation.on_navigate(to_path, from_path)

    async def check_all(self) -> dict[str, ReconcileOutcome]:
        """Run a version check of each store and wait for the results."""
        return {
            store.resource: await store.check_version_and_update()
            for store in self.reconciled_stores
        }

    async def force_refresh(self) -> dict[str, bool]:
        """Refetch every store now and restart their debounce windows."""
        results = {}
        for store in self.reconciled_stores:
            results[store.resource] = await store.fetch()
            store.mark_version_checked_now()
        return results

    async def aclose(self) -> None:
        """Wait for background work, then release stores and owned HTTP clients."""
        await self.tasks.drain()
        for store in self.reconciled_stores:
            store.close()
        self.projects.cache.close()
        if self._owns_http_client:
            await self.http_client.aclose()
        if self._owns_github_client:
            await self.github_client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
