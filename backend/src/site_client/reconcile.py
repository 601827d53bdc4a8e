"""
Version reconciliation between a cached resource and the server.

A check runs in four steps:
1. Skip entirely if the resource was checked less than the debounce window ago.
2. Record the attempt (last_checked_at = now) before any network call, so a
   burst of triggers issues a single request.
3. Ask the version endpoint for the resource's current stamp.
4. On mismatch, refetch the full resource and replace the cache with the payload
   and the version derived from that payload.

Any failure while fetching ends the check and keeps the cached copy. Network
and API errors are logged as warnings, anything else with its traceback. Nothing
is retried until the next trigger after the debounce window expires.
"""
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Generic, TypeVar

import httpx

from .api_client import ApiResponseError
from .cache import CachedResource
from .versions import NO_VERSION, Clock, now_ms

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Returns the server's version stamp per resource name
VersionFetcher = Callable[[], Awaitable[dict[str, str]]]
# Returns the full resource and the version derived from it
ResourceFetcher = Callable[[], Awaitable[tuple[Any, str]]]

# Failures that leave the cache as-is instead of propagating
RECOVERABLE_ERRORS = (httpx.HTTPError, ApiResponseError)


class ReconcileOutcome(StrEnum):
    """How a reconciliation check ended."""

    DEBOUNCED = "debounced"  # checked recently, no network call
    MATCHED = "matched"  # server version equals the cached one
    REFETCHED = "refetched"  # mismatch, cache replaced with fresh data
    FAILED = "failed"  # version check or refetch failed, cache untouched


class Reconciler(Generic[T]):
    """Debounced version check and refetch for one cached resource."""

    def __init__(
        self,
        cache: CachedResource[T],
        fetch_versions: VersionFetcher,
        fetch_resource: ResourceFetcher,
        *,
        interval_ms: int,
        clock: Clock = now_ms,
    ) -> None:
        self.cache = cache
        self._fetch_versions = fetch_versions
        self._fetch_resource = fetch_resource
        self.interval_ms = interval_ms
        self._clock = clock

    @property
    def resource(self) -> str:
        return self.cache.name

    def is_due(self) -> bool:
        """Whether the debounce window since the last check has expired."""
        return self._clock() - self.cache.last_checked_at >= self.interval_ms

    async def run(self) -> ReconcileOutcome:
        """Check the server version and refetch on mismatch. Never raises."""
        if not self.is_due():
            logger.debug("%s version check skipped (debounce window)", self.resource)
            return ReconcileOutcome.DEBOUNCED

        self.cache.touch_checked_now()

        try:
            versions = await self._fetch_versions()
        except RECOVERABLE_ERRORS as e:
            logger.warning("%s version check failed, keeping cache: %s", self.resource, e)
            return ReconcileOutcome.FAILED
        except Exception:
            logger.exception("%s version check failed unexpectedly", self.resource)
            return ReconcileOutcome.FAILED

        server_version = str(versions.get(self.resource, NO_VERSION))
        # An empty local version means never fetched and always mismatches
        if self.cache.version and self.cache.version == server_version:
            logger.debug("%s cache is current (version=%s)", self.resource, server_version)
            return ReconcileOutcome.MATCHED

        logger.info(
            "%s version changed (local=%r server=%s), refetching",
            self.resource,
            self.cache.version,
            server_version,
        )
        try:
            data, version = await self._fetch_resource()
        except RECOVERABLE_ERRORS as e:
            logger.warning("%s refetch failed, keeping cache: %s", self.resource, e)
            return ReconcileOutcome.FAILED
        except Exception:
            logger.exception("%s refetch failed unexpectedly", self.resource)
            return ReconcileOutcome.FAILED

        self.cache.replace(data, version)
        return ReconcileOutcome.REFETCHED
