"""
Logging Factory

Creates and caches logger instances from a LoggingConfig struct.
Components get their logger once and keep it as self.logger.
"""

import os
from typing import Dict, Optional

from .interfaces import HFTLoggerInterface
from .hft_logger import HFTLogger
from .backends.console import ConsoleBackend, ColorConsoleBackend
from .backends.file import FileBackend
from .structs import LoggingConfig, PerformanceConfig


class LoggerFactory:
    """Logging factory - trust config, fail fast."""

    _cached_loggers: Dict[str, HFTLoggerInterface] = {}
    _default_config: Optional[LoggingConfig] = None

    @classmethod
    def create_logger(cls, name: str, config: Optional[LoggingConfig] = None) -> HFTLoggerInterface:
        """Create (or return the cached) logger for name."""
        if name in cls._cached_loggers:
            return cls._cached_loggers[name]

        config = config or cls.get_default_config()

        backends = []
        if config.console and config.console.enabled:
            backend_class = ColorConsoleBackend if config.console.color else ConsoleBackend
            backends.append(backend_class(config.console, 'console'))

        if config.file and config.file.enabled:
            backends.append(FileBackend(config.file, 'file'))

        logger = HFTLogger(
            name=name,
            backends=backends,
            config=config.performance or PerformanceConfig(),
            default_context=config.default_context
        )

        cls._cached_loggers[name] = logger
        return logger

    @classmethod
    def configure(cls, config: LoggingConfig) -> None:
        """Install config as default; loggers created earlier are rebuilt on next lookup."""
        config.validate()
        cls._default_config = config
        cls._cached_loggers.clear()

    @classmethod
    def get_default_config(cls) -> LoggingConfig:
        if cls._default_config is None:
            cls._default_config = LoggingConfig.for_environment(os.getenv('ENVIRONMENT', 'dev'))
        return cls._default_config

    @classmethod
    def clear_cache(cls) -> None:
        cls._cached_loggers.clear()
        cls._default_config = None


def get_logger(name: str) -> HFTLoggerInterface:
    """Get logger instance."""
    return LoggerFactory.create_logger(name)


def get_exchange_logger(exchange: str, component: str = None) -> HFTLoggerInterface:
    """Get exchange logger with optional component, e.g. ("bybit", "ws.spot")."""
    name = f"{exchange}.{component}" if component else exchange
    return get_logger(name)


def configure_logging(config: LoggingConfig) -> None:
    LoggerFactory.configure(config)
