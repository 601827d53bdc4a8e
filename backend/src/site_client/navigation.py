"""Route-change hook that schedules version checks."""
import logging
from collections.abc import Sequence

from .stores.base import ResourceStore
from .tasks import TaskQueue

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class NavigationTrigger:
    """
    Schedules a version check of every store after each completed navigation.

    Checks run in the background and never delay the navigation itself. The
    reconcilers' debounce window keeps rapid navigation from hitting the network.
    """

    def __init__(self, stores: Sequence[ResourceStore], tasks: TaskQueue) -> None:
        self.stores = list(stores)
        self.tasks = tasks

    def schedule_checks(self) -> int:
        """Submit one check per store. Returns the number of checks submitted."""
        submitted = 0
        for store in self.stores:
            coro = store.check_version_and_update()
            try:
                self.tasks.submit(coro, name=f"{store.resource}-version-check")
            except RuntimeError as e:
                # No running event loop
                coro.close()
                logger.warning("Cannot schedule %s version check: %s", store.resource, e)
                continue
            submitted += 1
        return submitted

    def on_navigate(self, to_path: str, from_path: str | None) -> int:
        """
        Handle a completed navigation.

        The initial page load (no from_path) is covered by SiteClient.start, and
        the login page has no cached resources to show.
        """
        if from_path is None or to_path == LOGIN_PATH:
            return 0
        logger.debug("Navigation %s -> %s, scheduling version checks", from_path, to_path)
        return self.schedule_checks()
