"""
Timer scheduling for adapters.

Adapters never call asyncio.sleep for keepalive or reconnect timing
themselves; they ask a Scheduler. Production code uses AsyncioScheduler;
tests substitute a scheduler that fires callbacks on demand.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from infrastructure.logging import get_logger
from .task_utils import TaskManager

AsyncCallback = Callable[[], Awaitable[None]]


class TimerHandle(ABC):
    """Cancellable reference to a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        pass


class Scheduler(ABC):
    """Runs async callbacks once after a delay or repeatedly at an interval."""

    @abstractmethod
    def call_later(self, delay: float, callback: AsyncCallback) -> TimerHandle:
        pass

    @abstractmethod
    def call_every(self, interval: float, callback: AsyncCallback) -> TimerHandle:
        pass


class _TaskHandle(TimerHandle):
    __slots__ = ('_task',)

    def __init__(self, task: asyncio.Task):
        self._task = task

    def cancel(self) -> None:
        if not self._task.done():
            self._task.cancel()

    @property
    def active(self) -> bool:
        return not self._task.done()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by tasks on the running event loop."""

    def __init__(self, name: str = "scheduler"):
        self._tasks = TaskManager(name)
        self.logger = get_logger(f"utils.{name}")

    def call_later(self, delay: float, callback: AsyncCallback) -> TimerHandle:
        async def _run():
            await asyncio.sleep(delay)
            await callback()

        return _TaskHandle(self._tasks.create_task(_run(), name="later"))

    def call_every(self, interval: float, callback: AsyncCallback) -> TimerHandle:
        async def _run():
            while True:
                await asyncio.sleep(interval)
                try:
                    await callback()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    # A failing periodic job must not stop the next tick
                    self.logger.error("Periodic callback failed",
                                      callback=getattr(callback, '__qualname__', repr(callback)),
                                      error_type=type(e).__name__,
                                      error=str(e))

        return _TaskHandle(self._tasks.create_task(_run(), name="every"))

    async def shutdown(self) -> None:
        await self._tasks.shutdown()
