"""Fire-and-forget background tasks."""
import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class TaskQueue:
    """
    Runs coroutines as detached asyncio tasks.

    Submitters get no handle back and never see a task's failure - exceptions are
    logged here. Tasks are not cancelled when superseded by a newer submission of
    the same work; each one runs to completion and the last to finish wins.
    """

    def __init__(self) -> None:
        # Strong references - the event loop only keeps weak ones
        self._tasks: set[asyncio.Task[Any]] = set()

    def submit(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> None:
        """Schedule coro to run after the current step of the event loop."""
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task %s failed: %s",
                task.get_name(),
                exc,
                exc_info=exc,
            )

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every submitted task (including ones they submit) has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
