"""
Task and connection teardown helpers.

Adapter shutdown must finish even when a reader task or a socket close
hangs, so every wait here is bounded and failures are reported as a
boolean instead of raised.
"""

import asyncio
from typing import Iterable, Optional, Set


async def cancel_tasks_with_timeout(
    tasks: Iterable[Optional[asyncio.Task]],
    timeout: float = 2.0,
    logger=None
) -> bool:
    """
    Cancel tasks and wait for them to unwind.

    None entries, finished tasks and the calling task itself are skipped.
    Returns False when some task was still running after `timeout` seconds.
    """
    current = asyncio.current_task()
    pending = [t for t in tasks if t is not None and not t.done() and t is not current]
    if not pending:
        return True

    for task in pending:
        task.cancel()

    done, still_running = await asyncio.wait(pending, timeout=timeout)
    for task in done:
        # Retrieve errors raised while unwinding so they are not reported as unhandled
        if not task.cancelled():
            task.exception()
    if still_running:
        if logger:
            logger.warning("Task cancellation timed out", timeout=timeout, still_running=len(still_running))
        return False
    return True


async def safe_close_connection(connection, timeout: float = 1.0, logger=None) -> bool:
    """Close anything with an async close(); False on timeout or error."""
    if connection is None:
        return True

    try:
        await asyncio.wait_for(connection.close(), timeout=timeout)
    except asyncio.TimeoutError:
        if logger:
            logger.warning("Connection close timed out", timeout=timeout)
        return False
    except Exception as e:
        if logger:
            logger.error("Error closing connection", error_type=type(e).__name__, error=str(e))
        return False
    return True


class TaskManager:
    """Owns the background tasks of one component; shutdown() cancels them all."""

    def __init__(self, name: str = "tasks"):
        self.name = name
        self._tasks: Set[asyncio.Task] = set()
        self._created = 0

    def create_task(self, coro, name: Optional[str] = None) -> asyncio.Task:
        self._created += 1
        task = asyncio.create_task(coro, name=f"{self.name}.{name or self._created}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def shutdown(self, timeout: float = 2.0, logger=None) -> bool:
        """Cancel every live task. The manager can be reused afterwards."""
        tasks = list(self._tasks)
        self._tasks.clear()
        return await cancel_tasks_with_timeout(tasks, timeout, logger)

    @property
    def active_task_count(self) -> int:
        return sum(1 for task in self._tasks if not task.done())
