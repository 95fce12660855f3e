"""
Logging configuration.

Frozen msgspec structs, decoded from the `logging:` section of config.yaml
or built from an environment preset with LoggingConfig.for_environment().
"""

from typing import Any, Dict, Optional

from msgspec import Struct

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
ENVIRONMENTS = ("dev", "staging", "prod", "test")


class BackendConfig(Struct, frozen=True):
    enabled: bool = True
    min_level: str = "INFO"

    def validate(self) -> None:
        if self.min_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.min_level}")


class ConsoleBackendConfig(BackendConfig, frozen=True):
    """stdout backend; context is rendered as trailing key=value pairs."""
    color: bool = True
    include_context: bool = True
    max_message_length: int = 1000


class FileBackendConfig(BackendConfig, frozen=True):
    """
    aiofiles backend.

    Lines are buffered up to buffer_size or flush_interval seconds, the file
    is rotated to path.1 ... path.<backup_count> past max_size_mb.
    """
    path: str = "logs/spread_monitor.log"
    format: str = "text"  # text | json
    max_size_mb: int = 100
    backup_count: int = 5
    buffer_size: int = 256
    flush_interval: float = 1.0

    def validate(self) -> None:
        super().validate()
        if self.format not in ("text", "json"):
            raise ValueError(f"Invalid file log format: {self.format}")
        if self.max_size_mb <= 0 or self.backup_count < 0:
            raise ValueError("max_size_mb must be positive and backup_count non-negative")


class PerformanceConfig(Struct, frozen=True):
    """Ring buffer capacity and dispatch batching of HFTLogger."""
    buffer_size: int = 10000
    batch_size: int = 50
    dispatch_interval: float = 0.01

    def validate(self) -> None:
        if min(self.buffer_size, self.batch_size) <= 0 or self.dispatch_interval <= 0:
            raise ValueError("buffer_size, batch_size and dispatch_interval must be positive")


class LoggingConfig(Struct, frozen=True):
    environment: str = "dev"
    console: Optional[ConsoleBackendConfig] = None
    file: Optional[FileBackendConfig] = None
    performance: Optional[PerformanceConfig] = None
    default_context: Optional[Dict[str, Any]] = None

    def validate(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {self.environment}")
        for section in (self.console, self.file, self.performance):
            if section is not None:
                section.validate()

    @classmethod
    def for_environment(cls, environment: str) -> "LoggingConfig":
        """Preset used when no logging section was configured."""
        environment = environment.lower()
        if environment == "prod":
            return cls(
                environment="prod",
                console=ConsoleBackendConfig(min_level="INFO", color=False, include_context=False),
                file=FileBackendConfig(min_level="WARNING", path="logs/spread_monitor.jsonl", format="json",
                                       max_size_mb=500, backup_count=10),
                performance=PerformanceConfig(buffer_size=50000, batch_size=100)
            )
        if environment == "test":
            return cls(environment="test", console=ConsoleBackendConfig(min_level="WARNING", color=False))
        return cls(
            environment=environment if environment in ENVIRONMENTS else "dev",
            console=ConsoleBackendConfig(min_level="DEBUG"),
            file=FileBackendConfig(min_level="INFO"),
            performance=PerformanceConfig()
        )
