"""Owned scope for fire-and-forget background work."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)


@dataclass
class BackgroundTasks:
    """Tracks detached tasks so they can be awaited or cancelled together.

    Callers that schedule work never see its outcome: exceptions are logged
    here and dropped.
    """

    _tasks: set[asyncio.Task[object]] = field(default_factory=set)

    @property
    def pending(self) -> int:
        """Number of tasks that have not finished yet."""
        return sum(1 for task in self._tasks if not task.done())

    def schedule(
        self, coro: Coroutine[object, object, object], *, name: str
    ) -> asyncio.Task[object]:
        """Start ``coro`` without waiting for it."""
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled task, including late additions, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
            self._tasks = {task for task in self._tasks if not task.done()}

    async def close(self) -> None:
        """Cancel in-flight tasks and wait for them to unwind."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def _on_done(self, task: asyncio.Task[object]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error(
                "Background task %s failed", task.get_name(), exc_info=exc
            )
