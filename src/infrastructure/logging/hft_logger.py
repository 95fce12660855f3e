"""
Structured Logger Implementation

Logger with ring buffer and async dispatch to backends. Log calls never
block: they build a record and append it to the buffer; a background task
drains the buffer into the backends.
"""

import asyncio
import logging
import os
import time
from typing import Dict, List, Optional, Any
import weakref

from infrastructure.data_structures import RingBuffer
from .interfaces import HFTLoggerInterface, LogBackend, LogRecord, LogLevel
from .structs import PerformanceConfig


_PY_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
}


class HFTLogger(HFTLoggerInterface):
    """
    Logger with async dispatch and multiple backends.

    - Zero blocking on log calls
    - Ring buffer for record queuing
    - Warnings and above are also forwarded immediately to the stdlib
      logging tree so they surface even before the dispatch task runs
    - Synchronous dispatch when no event loop is running (scripts, tests)
    """

    # Class-level registry for cleanup
    _instances = weakref.WeakSet()

    def __init__(self, name: str, backends: List[LogBackend], config: PerformanceConfig,
                 default_context: Optional[Dict[str, Any]] = None):
        if not isinstance(config, PerformanceConfig):
            raise TypeError(f"Expected PerformanceConfig, got {type(config)}")

        self.name = name
        self.backends = backends
        self.batch_size = config.batch_size
        self.dispatch_interval = config.dispatch_interval

        # Persistent context for all log messages
        self.context: Dict[str, Any] = dict(default_context or {})

        self._buffer: RingBuffer[LogRecord] = RingBuffer(config.buffer_size)

        self._dispatch_task: Optional[asyncio.Task] = None
        self._shutdown_event: Optional[asyncio.Event] = None

        self._py_logger = logging.getLogger(name)
        environment = os.getenv('ENVIRONMENT', 'dev').lower()
        if environment in ('dev', 'development', 'local', 'test'):
            self._py_logger.propagate = True

        HFTLogger._instances.add(self)

    @property
    def dispatch_running(self) -> bool:
        return self._dispatch_task is not None and not self._dispatch_task.done()

    def _start_dispatch_task(self) -> bool:
        """Start the async dispatch task if an event loop is running."""
        if self.dispatch_running:
            return True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return False
        if self._shutdown_event is None:
            self._shutdown_event = asyncio.Event()
        self._dispatch_task = loop.create_task(self._dispatch_loop())
        return True

    async def _dispatch_loop(self) -> None:
        """Background task draining the buffer into the backends."""
        try:
            while not self._shutdown_event.is_set():
                batch = self._buffer.get_batch(self.batch_size)
                if batch:
                    await self._process_batch(batch)
                else:
                    await asyncio.sleep(self.dispatch_interval)
        except asyncio.CancelledError:
            pass

    async def _process_batch(self, batch: List[LogRecord]) -> None:
        for record in batch:
            for backend in self.backends:
                if backend.enabled and backend.should_handle(record):
                    try:
                        await backend.write(record)
                    except Exception as e:
                        backend.record_failure(e)

    def _sync_dispatch(self, record: LogRecord) -> None:
        """Synchronous dispatch for environments without an event loop."""
        for backend in self.backends:
            if backend.enabled and backend.should_handle(record):
                try:
                    backend.write_sync(record)
                except Exception as e:
                    backend.record_failure(e)

    def _enqueue(self, record: LogRecord) -> None:
        if not self._start_dispatch_task():
            self._sync_dispatch(record)
            return
        if not self._buffer.put_nowait(record):
            print(f"HFTLogger buffer full, dropped: {record.message[:50] or record.metric_name}")

    def log(self, level: LogLevel, msg: str, **context) -> None:
        full_context = {**self.context, **context}
        if level >= LogLevel.WARNING and self._py_logger.propagate:
            self._py_logger.log(_PY_LEVELS[level], f"{msg} {full_context}" if full_context else msg)
        self._enqueue(LogRecord.create_text(level, self.name, msg, **full_context))

    def metric(self, name: str, value: float, **tags) -> None:
        self._enqueue(LogRecord.create_metric(self.name, name, value, **{**self.context, **tags}))

    def set_context(self, **context) -> None:
        self.context.update(context)

    async def flush(self) -> None:
        """Drain remaining records and flush all backends."""
        remaining = self._buffer.get_batch(self._buffer.size())
        if remaining:
            await self._process_batch(remaining)

        for backend in self.backends:
            try:
                await backend.flush()
            except Exception as e:
                backend.record_failure(e)

    def get_performance_stats(self) -> Dict[str, Any]:
        return {
            "buffer_size": self._buffer.size(),
            "buffer_dropped": self._buffer.dropped_count(),
            "buffer_capacity": self._buffer.maxsize,
            "dispatch_task_running": self.dispatch_running,
            "backends_enabled": sum(1 for b in self.backends if b.enabled),
            "backends_total": len(self.backends)
        }

    async def shutdown(self) -> None:
        """Stop the dispatch task and flush what is left."""
        if self._shutdown_event:
            self._shutdown_event.set()

        if self.dispatch_running:
            try:
                await asyncio.wait_for(self._dispatch_task, timeout=5.0)
            except asyncio.TimeoutError:
                self._dispatch_task.cancel()
        self._dispatch_task = None
        self._shutdown_event = None

        await self.flush()

    @classmethod
    async def shutdown_all(cls) -> None:
        """Shutdown all logger instances."""
        tasks = [logger.shutdown() for logger in list(cls._instances)]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


class LoggingTimer:
    """Context manager for timing operations with automatic latency logging."""

    def __init__(self, logger: HFTLoggerInterface, operation: str, **tags):
        self.logger = logger
        self.operation = operation
        self.tags = tags
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        self.logger.latency(self.operation, self.elapsed_ms, **self.tags)

        if exc_type is not None:
            self.logger.error(f"{self.operation} failed",
                              error_type=exc_type.__name__,
                              **self.tags)

    @property
    def elapsed_ms(self) -> float:
        if self.start_time is None:
            return 0.0
        end_time = self.end_time or time.perf_counter()
        return (end_time - self.start_time) * 1000
