"""
Base class for stores that mirror one server resource.

A store renders from its CachedResource immediately and keeps it fresh through a
Reconciler. User actions on the resource go straight to the API and rewrite the
cache on success without waiting for a version check.
"""
import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

import httpx

from ..api_client import error_message, get_versions
from ..cache import CachedResource
from ..config import ClientSettings
from ..reconcile import RECOVERABLE_ERRORS, ReconcileOutcome, Reconciler
from ..storage import LocalStorage
from ..tasks import TaskQueue
from ..versions import Clock, now_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResourceStore(ABC, Generic[T]):
    """
    Cached, version-reconciled view of one API resource.

    Subclasses must define:
    - resource: name used for storage keys and in the version snapshot
    - default_data(): value rendered before anything was cached or fetched
    - fetch_remote(): the full payload and the version derived from it
    """

    resource: str

    def __init__(
        self,
        client: httpx.AsyncClient,
        storage: LocalStorage,
        tasks: TaskQueue,
        settings: ClientSettings,
        *,
        origin: str | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self.client = client
        self.tasks = tasks
        self.settings = settings
        self._clock = clock
        self.cache: CachedResource[T] = CachedResource(
            self.resource,
            storage,
            self.default_data,
            origin=origin,
            clock=clock,
        )
        self.reconciler: Reconciler[T] = Reconciler(
            self.cache,
            lambda: get_versions(self.client),
            self.fetch_remote,
            interval_ms=settings.version_check_interval_ms,
            clock=clock,
        )
        self.is_loading = False
        self.error: str | None = None
        self.last_fetch_time = 0
        self._inflight: asyncio.Task[bool] | None = None

    @abstractmethod
    def default_data(self) -> T:
        """Data used before anything is cached."""
        ...

    @abstractmethod
    async def fetch_remote(self) -> tuple[T, str]:
        """Fetch the full resource. Returns (data, version derived from data)."""
        ...

    @property
    def data(self) -> T:
        return self.cache.data

    @property
    def version(self) -> str:
        return self.cache.version

    def init_from_local(self) -> None:
        """Load the cached copy so it can be rendered before any network call."""
        self.cache.load_from_durable()

    async def check_version_and_update(self) -> ReconcileOutcome:
        """Run a debounced version check, refetching on mismatch."""
        return await self.reconciler.run()

    async def fetch(self) -> bool:
        """
        Fetch the full resource now, bypassing the version check.

        Concurrent callers share one request. On failure the cached copy stays
        in place and error is set.
        """
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(
                self._fetch(), name=f"{self.resource}-fetch",
            )
        return await asyncio.shield(self._inflight)

    async def _fetch(self) -> bool:
        self.is_loading = True
        self.error = None
        try:
            data, version = await self.fetch_remote()
        except RECOVERABLE_ERRORS as e:
            logger.warning("Fetching %s failed: %s", self.resource, e)
            self.error = error_message(e, f"Failed to load {self.resource}")
            return False
        finally:
            self.is_loading = False
        self.cache.replace(data, version)
        self.last_fetch_time = self._clock()
        return True

    def mark_version_checked_now(self) -> None:
        """Restart the debounce window, e.g. right after a manual refresh."""
        self.cache.touch_checked_now()

    def should_refresh(self) -> bool:
        """False if the resource was fetched within the refresh interval."""
        return self._clock() - self.last_fetch_time > self.settings.refresh_interval_ms

    def commit_local_change(self, data: T) -> None:
        """Persist data changed by a user action, stamped with the current time."""
        self.cache.replace(data, str(self._clock()))

    def show_transient_error(self, message: str) -> None:
        """Set error and clear it after error_display_seconds unless replaced meanwhile."""
        self.error = message
        self.tasks.submit(
            self._clear_error_later(message),
            name=f"{self.resource}-clear-error",
        )

    async def _clear_error_later(self, message: str) -> None:
        await asyncio.sleep(self.settings.error_display_seconds)
        if self.error == message:
            self.error = None

    def close(self) -> None:
        """Detach from the storage bus."""
        self.cache.close()

    def _snapshot(self) -> Any:
        """Deep copy of the current data, for rolling back optimistic updates."""
        return copy.deepcopy(self.cache.data)
