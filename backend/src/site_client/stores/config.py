"""Site configuration store."""
import logging
from typing import Any

from ..api_client import ApiResponseError, api_delete, api_get, api_post
from ..reconcile import RECOVERABLE_ERRORS
from ..versions import derive_version
from .base import ResourceStore

logger = logging.getLogger(__name__)


class ConfigStore(ResourceStore[dict[str, Any]]):
    """Cached site configuration (GitHub token, preferences)."""

    resource = "config"

    def default_data(self) -> dict[str, Any]:
        return {}

    async def fetch_remote(self) -> tuple[dict[str, Any], str]:
        config = await api_get(self.client, "config")
        if not isinstance(config, dict):
            raise ApiResponseError("Config response is not an object")
        return config, derive_version(config)

    @property
    def github_token(self) -> str:
        return self.cache.data.get("github_token") or ""

    @property
    def preferences(self) -> dict[str, Any]:
        return self.cache.data.get("preferences") or {}

    async def update_github_token(self, token: str) -> bool:
        """Store a new GitHub token on the server, then reload the configuration."""
        try:
            await api_post(self.client, "config/github-token", json={"token": token})
        except RECOVERABLE_ERRORS as e:
            logger.warning("Updating GitHub token failed: %s", e)
            return False
        return await self.fetch()

    async def delete_github_token(self) -> bool:
        """Remove the GitHub token on the server, then reload the configuration."""
        try:
            await api_delete(self.client, "config/github-token")
        except RECOVERABLE_ERRORS as e:
            logger.warning("Deleting GitHub token failed: %s", e)
            return False
        return await self.fetch()
