from .task_utils import TaskManager, cancel_tasks_with_timeout, safe_close_connection
from .scheduler import Scheduler, TimerHandle, AsyncioScheduler, AsyncCallback

__all__ = [
    "TaskManager",
    "cancel_tasks_with_timeout",
    "safe_close_connection",
    "Scheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "AsyncCallback",
]
