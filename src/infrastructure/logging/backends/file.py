"""
File Backend for Persistent Logging

Async file logging with buffering, size-based rotation and text or JSON
output.
"""

import asyncio
import time
from datetime import datetime
from pathlib import Path

import aiofiles
import aiofiles.os
import msgspec

from ..interfaces import LogBackend, LogRecord, LogLevel, LogType
from ..structs import FileBackendConfig


class FileBackend(LogBackend):
    """
    File logging backend.

    Lines are buffered and written with aiofiles once the buffer fills or
    the flush interval elapses. Metrics are written too, so spread and
    rejection counters end up next to the text log.
    """

    def __init__(self, config: FileBackendConfig, name: str = "file"):
        if not isinstance(config, FileBackendConfig):
            raise TypeError(f"Expected FileBackendConfig, got {type(config)}")

        super().__init__(name, LogLevel[config.min_level.upper()], config.enabled)
        self.config = config

        self.file_path = Path(config.path)
        self.format_type = config.format
        self.max_file_size = config.max_size_mb * 1024 * 1024
        self.backup_count = config.backup_count
        self.buffer_size = config.buffer_size
        self.flush_interval = config.flush_interval

        if self.enabled:
            self._ensure_directory()

        self._write_buffer = []
        self._last_flush = time.time()
        self._lock = asyncio.Lock()

    async def write(self, record: LogRecord) -> None:
        if not self.enabled:
            return

        async with self._lock:
            self._write_buffer.append(self._format(record))

            should_flush = (
                len(self._write_buffer) >= self.buffer_size or
                (time.time() - self._last_flush) >= self.flush_interval
            )
            if should_flush:
                await self._flush_buffer()

    def write_sync(self, record: LogRecord) -> None:
        """Used without a running loop; appends directly."""
        try:
            with open(self.file_path, 'a', encoding='utf-8') as f:
                f.write(self._format(record) + '\n')
        except OSError as e:
            self.record_failure(e)

    async def flush(self) -> None:
        if not self.enabled:
            return

        async with self._lock:
            await self._flush_buffer()

    async def _flush_buffer(self) -> None:
        if not self._write_buffer:
            return

        try:
            await self._check_rotation()

            async with aiofiles.open(self.file_path, 'a', encoding='utf-8') as f:
                await f.write('\n'.join(self._write_buffer) + '\n')

            self._write_buffer.clear()
            self._last_flush = time.time()

        except OSError as e:
            self.record_failure(e)

    def _ensure_directory(self) -> None:
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"FileBackend directory creation error: {e}")

    async def _check_rotation(self) -> None:
        if not await aiofiles.os.path.exists(self.file_path):
            return

        file_size = await aiofiles.os.path.getsize(self.file_path)
        if file_size >= self.max_file_size:
            self._rotate_file()

    def _rotate_file(self) -> None:
        """Shift log.N -> log.N+1 and move the current file to log.1."""
        for i in range(self.backup_count - 1, 0, -1):
            old_file = self.file_path.with_suffix(f'.{i}')
            new_file = self.file_path.with_suffix(f'.{i + 1}')
            if old_file.exists():
                old_file.replace(new_file)

        if self.backup_count > 0:
            self.file_path.replace(self.file_path.with_suffix('.1'))
        else:
            self.file_path.unlink()

    def _format(self, record: LogRecord) -> str:
        if self.format_type == 'json':
            return self._format_json(record)
        return self._format_text(record)

    def _format_text(self, record: LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.timestamp).isoformat()

        if record.log_type == LogType.METRIC:
            message = f"[{timestamp}] METRIC {record.logger_name}: {record.metric_name}={record.metric_value}"
        else:
            message = f"[{timestamp}] {record.level.name} {record.logger_name}: {record.message}"

        if record.context:
            message += " | " + ", ".join(f"{k}={v}" for k, v in record.context.items())

        correlation = []
        if record.exchange:
            correlation.append(f"exchange={record.exchange}")
        if record.symbol:
            correlation.append(f"symbol={record.symbol}")
        if correlation:
            message += " | " + ", ".join(correlation)

        return message

    def _format_json(self, record: LogRecord) -> str:
        data = {
            'timestamp': record.timestamp,
            'level': record.level.name,
            'type': record.log_type.name,
            'logger': record.logger_name,
            'message': record.message,
        }
        if record.context:
            data['context'] = record.context
        if record.exchange:
            data['exchange'] = record.exchange
        if record.symbol:
            data['symbol'] = record.symbol
        if record.log_type == LogType.METRIC:
            data['metric'] = {'name': record.metric_name, 'value': record.metric_value}

        return msgspec.json.encode(data, enc_hook=str).decode('utf-8')
