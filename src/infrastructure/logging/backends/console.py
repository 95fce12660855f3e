"""
Console Backend

Human-readable output for development. Writes synchronously to stdout;
console writes are cheap enough that buffering buys nothing.
"""

import sys
from datetime import datetime

from ..interfaces import LogBackend, LogRecord, LogLevel
from ..structs import ConsoleBackendConfig


class ConsoleBackend(LogBackend):
    """Plain console backend."""

    def __init__(self, config: ConsoleBackendConfig, name: str = "console"):
        if not isinstance(config, ConsoleBackendConfig):
            raise TypeError(f"Expected ConsoleBackendConfig, got {type(config)}")

        # Metrics go to files, not the terminal
        super().__init__(name, LogLevel[config.min_level.upper()], config.enabled, accepts_metrics=False)
        self.config = config
        self.include_context = config.include_context
        self.max_message_length = config.max_message_length

    async def write(self, record: LogRecord) -> None:
        self.write_sync(record)

    def write_sync(self, record: LogRecord) -> None:
        sys.stdout.write(self._format(record) + "\n")

    async def flush(self) -> None:
        sys.stdout.flush()

    def _format(self, record: LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.timestamp).strftime("%H:%M:%S.%f")[:-3]
        message = record.message
        if len(message) > self.max_message_length:
            message = message[:self.max_message_length] + "..."

        line = f"{timestamp} {record.level.name:<8} {record.logger_name}: {message}"

        if self.include_context:
            parts = []
            if record.exchange:
                parts.append(f"exchange={record.exchange}")
            if record.symbol:
                parts.append(f"symbol={record.symbol}")
            parts.extend(f"{k}={v}" for k, v in record.context.items())
            if parts:
                line += f" | {', '.join(parts)}"
        return line


class ColorConsoleBackend(ConsoleBackend):
    """Console backend with ANSI colored level names."""

    COLORS = {
        LogLevel.DEBUG: "\033[36m",
        LogLevel.INFO: "\033[32m",
        LogLevel.WARNING: "\033[33m",
        LogLevel.ERROR: "\033[31m",
        LogLevel.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def _format(self, record: LogRecord) -> str:
        return f"{self.COLORS.get(record.level, '')}{super()._format(record)}{self.RESET}"
