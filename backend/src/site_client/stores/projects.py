"""GitHub project list store."""
import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from ..cache import CachedResource
from ..config import ClientSettings
from ..storage import LocalStorage
from ..versions import Clock, now_ms

logger = logging.getLogger(__name__)

GITHUB_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "site-client",
}
REPOS_PER_PAGE = 50

Project = dict[str, Any]


class ProjectFetchError(Exception):
    """Raised when the GitHub repository listing cannot be used."""


def create_github_client(settings: ClientSettings) -> httpx.AsyncClient:
    """Create the client used for the GitHub REST API."""
    return httpx.AsyncClient(
        base_url=settings.github_api_url,
        timeout=settings.request_timeout,
        headers=GITHUB_HEADERS,
    )


def repo_to_project(repo: dict[str, Any], index: int) -> Project:
    """Map a GitHub repository object to a project entry."""
    language = repo.get("language") or "Other"
    name = repo.get("name", "")
    return {
        "id": index + 1,
        "name": name,
        "description": repo.get("description") or f"{name} repository",
        "language": language,
        "stars": repo.get("stargazers_count", 0),
        "forks": repo.get("forks_count", 0),
        "url": repo.get("html_url", ""),
        "tags": [language, "GitHub"],
        "is_from_github": True,
        "updated_at": repo.get("updated_at"),
        "created_at": repo.get("created_at"),
    }


def _describe_failure(response: httpx.Response, username: str) -> str:
    if response.status_code == 403:
        if response.headers.get("X-RateLimit-Remaining") == "0":
            reset = response.headers.get("X-RateLimit-Reset")
            when = "later"
            if reset and reset.isdigit():
                when = datetime.fromtimestamp(int(reset), tz=UTC).isoformat()
            return (
                f"GitHub API rate limit reached, retry after {when} "
                "or configure an access token"
            )
        return "GitHub API request failed: 403 forbidden, try using an access token"
    if response.status_code == 404:
        return f'GitHub API request failed: user "{username}" not found'
    return f"GitHub API request failed: {response.status_code}"


class ProjectStore:
    """
    Cached list of a user's public GitHub repositories.

    GitHub has no version endpoint, so the list is refreshed by age
    (projects_refresh_interval_minutes) instead of version reconciliation.
    Concurrent fetches for the same username and token share a single
    in-flight request unless force_refresh is passed.
    """

    resource = "projects"

    def __init__(
        self,
        github_client: httpx.AsyncClient,
        storage: LocalStorage,
        settings: ClientSettings,
        *,
        origin: str | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self.client = github_client
        self.settings = settings
        self._clock = clock
        self.cache: CachedResource[list[Project]] = CachedResource(
            self.resource, storage, list, origin=origin, clock=clock,
        )
        self.loading = False
        self.error: str | None = None
        self._pending: asyncio.Task[list[Project]] | None = None
        self._pending_key: tuple[str, str] | None = None

    @property
    def projects(self) -> list[Project]:
        return self.cache.data

    @property
    def last_fetch_time(self) -> int:
        return self.cache.last_checked_at

    @property
    def tags(self) -> list[str]:
        return sorted({tag for project in self.projects for tag in project.get("tags", [])})

    @property
    def languages(self) -> list[str]:
        return sorted({p["language"] for p in self.projects if p.get("language")})

    def by_tag(self, tag: str) -> list[Project]:
        return [p for p in self.projects if tag in p.get("tags", [])]

    def by_language(self, language: str) -> list[Project]:
        return [p for p in self.projects if p.get("language") == language]

    def init_from_local(self) -> None:
        self.cache.load_from_durable()

    def should_refresh(self) -> bool:
        """True if nothing is cached or the cached list is older than the refresh interval."""
        if not self.projects:
            return True
        return self._clock() - self.last_fetch_time > self.settings.projects_refresh_interval_ms

    def clear_cached_projects(self) -> None:
        self.cache.clear()

    async def fetch_github_repos(
        self, username: str, token: str = "", *, force_refresh: bool = False,
    ) -> list[Project]:
        """
        Load the user's repositories, newest activity first.

        Returns [] (with error set) on failure, leaving the cached list untouched.
        """
        if not username:
            return []
        key = (username, token)
        reusable = (
            self._pending is not None
            and not self._pending.done()
            and self._pending_key == key
        )
        if force_refresh or not reusable:
            self._pending_key = key
            self._pending = asyncio.create_task(
                self._fetch(username, token), name=f"github-repos-{username}",
            )
        # Shielded so a cancelled waiter does not cancel the shared request
        return await asyncio.shield(self._pending)

    async def force_refresh(self, username: str, token: str = "") -> list[Project]:
        return await self.fetch_github_repos(username, token, force_refresh=True)

    async def _fetch(self, username: str, token: str) -> list[Project]:
        self.loading = True
        self.error = None
        headers = {"Authorization": f"token {token}"} if token else None
        try:
            response = await self.client.get(
                f"users/{username}/repos",
                params={"sort": "updated", "per_page": REPOS_PER_PAGE},
                headers=headers,
            )
            if response.is_error:
                raise ProjectFetchError(_describe_failure(response, username))
            repos = response.json()
            if not isinstance(repos, list):
                raise ProjectFetchError("GitHub API returned an unexpected payload")
        except (httpx.HTTPError, ValueError, ProjectFetchError) as e:
            logger.warning("Fetching GitHub repositories for %s failed: %s", username, e)
            self.error = str(e) or "Failed to load GitHub repositories"
            return []
        finally:
            self.loading = False

        projects = [repo_to_project(repo, index) for index, repo in enumerate(repos)]
        now = self._clock()
        self.cache.last_checked_at = now
        self.cache.replace(projects, str(now))
        logger.info("Loaded %d GitHub repositories for %s", len(projects), username)
        return projects
