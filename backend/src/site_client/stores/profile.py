"""Profile store."""
import logging
from typing import Any

from ..api_client import ApiResponseError, api_get, api_post, api_put, error_message
from ..reconcile import RECOVERABLE_ERRORS
from ..versions import derive_version
from .base import ResourceStore

logger = logging.getLogger(__name__)

ProfileData = dict[str, Any]

DEFAULT_STATUS = {"text": "Coding...", "emoji": "💻"}


def split_profile_payload(payload: Any) -> ProfileData:
    """Turn the /profile payload into the cached {"profile", "timeline"} shape."""
    if not isinstance(payload, dict):
        raise ApiResponseError("Profile response is not an object")
    profile = dict(payload)
    timeline = profile.pop("timeline", None) or []
    if not profile.get("status"):
        profile["status"] = dict(DEFAULT_STATUS)
    return {"profile": profile, "timeline": timeline}


class ProfileStore(ResourceStore[ProfileData]):
    """Cached site profile and timeline."""

    resource = "profile"

    def default_data(self) -> ProfileData:
        return {
            "profile": {"name": "", "status": dict(DEFAULT_STATUS), "skills": []},
            "timeline": [],
        }

    async def fetch_remote(self) -> tuple[ProfileData, str]:
        payload = await api_get(self.client, "profile")
        data = split_profile_payload(payload)
        return data, derive_version(payload)

    @property
    def profile(self) -> dict[str, Any]:
        return self.cache.data.get("profile", {})

    @property
    def timeline(self) -> list[dict[str, Any]]:
        return self.cache.data.get("timeline", [])

    async def update_profile(self, updates: dict[str, Any]) -> dict[str, Any] | None:
        """
        Change profile fields optimistically.

        Returns the server's profile, or None after rolling back on failure.
        """
        before = self._snapshot()
        self.profile.update(updates)

        try:
            payload = await api_put(self.client, "profile", json=updates)
            data = split_profile_payload(payload)
        except RECOVERABLE_ERRORS as e:
            logger.warning("Updating profile failed: %s", e)
            self.cache.data = before
            self.show_transient_error(error_message(e, "Failed to update profile"))
            return None

        self.commit_local_change(data)
        return data["profile"]

    async def _write(self, method: str, path: str, json: Any, failure: str) -> bool:
        self.is_loading = True
        self.error = None
        try:
            if method == "post":
                payload = await api_post(self.client, path, json=json)
            else:
                payload = await api_put(self.client, path, json=json)
            data = split_profile_payload(payload)
        except RECOVERABLE_ERRORS as e:
            logger.warning("%s: %s", failure, e)
            self.error = error_message(e, failure)
            return False
        finally:
            self.is_loading = False
        self.commit_local_change(data)
        return True

    async def update_timeline(self, timeline: list[dict[str, Any]]) -> bool:
        """Replace the timeline."""
        return await self._write(
            "put", "profile/timeline", {"timeline": timeline}, "Failed to update timeline",
        )

    async def update_skills(self, skills: list[str]) -> bool:
        """Replace the skills list."""
        return await self._write(
            "put", "profile/skills", {"skills": skills}, "Failed to update skills",
        )

    async def reset_profile(self) -> bool:
        """Restore the server-side default profile."""
        return await self._write("post", "profile/reset", None, "Failed to reset profile")
