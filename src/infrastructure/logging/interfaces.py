"""
Logger and backend contracts.

Callers build a LogRecord and hand it over; rendering (text, JSON, colors)
is entirely the backend's job.
"""

import sys
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

# Context keys promoted to first-class record fields
CORRELATION_KEYS = ("exchange", "symbol")


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


class LogType(IntEnum):
    TEXT = 1
    METRIC = 2


def split_correlation(context: Dict[str, Any]) -> Tuple[Optional[str], Optional[str], Dict[str, Any]]:
    """Return (exchange, symbol, remaining context) without mutating context."""
    rest = {k: v for k, v in context.items() if k not in CORRELATION_KEYS}
    return context.get("exchange"), context.get("symbol"), rest


@dataclass
class LogRecord:
    timestamp: float
    level: LogLevel
    log_type: LogType
    logger_name: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    metric_name: Optional[str] = None
    metric_value: Optional[float] = None
    exchange: Optional[str] = None
    symbol: Optional[str] = None

    @classmethod
    def create_text(cls, level: LogLevel, logger_name: str, message: str, **context) -> 'LogRecord':
        exchange, symbol, rest = split_correlation(context)
        return cls(time.time(), level, LogType.TEXT, logger_name, message, rest,
                   exchange=exchange, symbol=symbol)

    @classmethod
    def create_metric(cls, logger_name: str, metric_name: str, value: float, **tags) -> 'LogRecord':
        exchange, symbol, rest = split_correlation(tags)
        return cls(time.time(), LogLevel.INFO, LogType.METRIC, logger_name, "", rest,
                   metric_name=metric_name, metric_value=value, exchange=exchange, symbol=symbol)


class LogBackend(ABC):
    """
    Output target for records.

    write() must not raise into the logger: failures are reported through
    record_failure(), and a backend that keeps failing turns itself off.
    """

    max_failures = 10

    def __init__(self, name: str, min_level: LogLevel = LogLevel.DEBUG,
                 enabled: bool = True, accepts_metrics: bool = True):
        self.name = name
        self.min_level = min_level
        self.enabled = enabled
        self.accepts_metrics = accepts_metrics
        self.failure_count = 0

    def should_handle(self, record: LogRecord) -> bool:
        if not self.enabled:
            return False
        if record.log_type == LogType.METRIC:
            return self.accepts_metrics
        return record.level >= self.min_level

    @abstractmethod
    async def write(self, record: LogRecord) -> None:
        pass

    def write_sync(self, record: LogRecord) -> None:
        """Fallback when no event loop runs; backends without one drop the record."""
        pass

    @abstractmethod
    async def flush(self) -> None:
        pass

    def record_failure(self, error: Exception) -> None:
        self.failure_count += 1
        if self.failure_count >= self.max_failures and self.enabled:
            self.enabled = False
            sys.stderr.write(f"Log backend {self.name} disabled after {self.failure_count} failures: {error}\n")


class HFTLoggerInterface(ABC):
    """
    Structured logger handed to components.

    Keyword arguments travel with the record as context:
        logger.info("Subscribed", exchange="bybit", symbols=12)
    Implementations provide log() and metric(); the rest derive from them.
    """

    @abstractmethod
    def log(self, level: LogLevel, msg: str, **context) -> None:
        pass

    @abstractmethod
    def metric(self, name: str, value: float, **tags) -> None:
        pass

    @abstractmethod
    def set_context(self, **context) -> None:
        pass

    @abstractmethod
    async def flush(self) -> None:
        pass

    def debug(self, msg: str, **context) -> None:
        self.log(LogLevel.DEBUG, msg, **context)

    def info(self, msg: str, **context) -> None:
        self.log(LogLevel.INFO, msg, **context)

    def warning(self, msg: str, **context) -> None:
        self.log(LogLevel.WARNING, msg, **context)

    def error(self, msg: str, **context) -> None:
        self.log(LogLevel.ERROR, msg, **context)

    def critical(self, msg: str, **context) -> None:
        self.log(LogLevel.CRITICAL, msg, **context)

    def latency(self, operation: str, duration_ms: float, **tags) -> None:
        self.metric(f"{operation}_latency_ms", duration_ms, **tags)

    def counter(self, name: str, value: int = 1, **tags) -> None:
        self.metric(f"{name}_count", float(value), **tags)
