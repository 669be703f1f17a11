"""Task tracking service for bloggernetes.

Long running work (one watch worker per resource kind, the web server) runs
as tracked asyncio tasks so that shutdown can cancel and drain them together.
"""

from abc import ABC, abstractmethod
import asyncio
import logging
from typing import Any, Coroutine

_LOGGER = logging.getLogger(__name__)

__all__: list[str] = []


class TaskService(ABC):
    """Service for tracking and cancelling long running asynchronous tasks."""

    @abstractmethod
    def create_background_task(
        self, coro: Coroutine[None, None, Any], name: str | None = None
    ) -> asyncio.Task[Any]:
        """Create and track a task expected to run until cancelled."""

    @abstractmethod
    async def cancel_background(self, timeout: float | None = None) -> None:
        """Cancel background tasks and wait up to `timeout` for them to finish."""


class TaskServiceImpl(TaskService):
    """Tracks background tasks in a set, removing them as they finish."""

    def __init__(self) -> None:
        """Initialize the task service."""
        self._background_tasks: set[asyncio.Task[Any]] = set()

    def create_background_task(
        self, coro: Coroutine[None, None, Any], name: str | None = None
    ) -> asyncio.Task[Any]:
        """Create and track a task expected to run until cancelled."""
        task = asyncio.create_task(coro, name=name)
        self._background_tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        try:
            task.result()
        except asyncio.CancelledError:
            pass
        except Exception as e:
            _LOGGER.error("Task %s failed: %s", task.get_name(), e)
        finally:
            self._background_tasks.discard(task)

    async def cancel_background(self, timeout: float | None = None) -> None:
        """Cancel background tasks and wait up to `timeout` for them to finish."""
        tasks = list(self._background_tasks)
        if not tasks:
            return
        for task in tasks:
            task.cancel()
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        if pending:
            _LOGGER.warning(
                "%d background tasks did not finish within %s seconds",
                len(pending),
                timeout,
            )
