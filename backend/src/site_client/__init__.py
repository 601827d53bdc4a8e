"""Caching client for the site API with version reconciliation."""
from .api_client import ApiResponseError
from .app import SiteClient
from .cache import CachedResource
from .config import ClientSettings, get_client_settings
from .navigation import NavigationTrigger
from .reconcile import ReconcileOutcome, Reconciler
from .storage import JsonFileStorage, LocalStorage, MemoryStorage, StorageEventBus
from .stores import ConfigStore, ProfileStore, ProjectStore, ResourceStore, TodoStore
from .tasks import TaskQueue

__all__ = [
    "ApiResponseError",
    "CachedResource",
    "ClientSettings",
    "ConfigStore",
    "JsonFileStorage",
    "LocalStorage",
    "MemoryStorage",
    "NavigationTrigger",
    "ProfileStore",
    "ProjectStore",
    "ReconcileOutcome",
    "Reconciler",
    "ResourceStore",
    "SiteClient",
    "StorageEventBus",
    "TaskQueue",
    "TodoStore",
]
