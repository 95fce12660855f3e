"""
Structured Logging

Configured from the `logging` section of config.yaml.

Usage:
    from infrastructure.logging import get_logger, get_exchange_logger

    logger = get_logger('arbitrage.price_store')
    logger.info("Store initialized", blocked=2)

    logger = get_exchange_logger('kucoin', 'ws.spot')
    logger.debug("Token fetched", endpoint=endpoint)

    logger.metric("spread_pct", 1.23, symbol="BTC")
"""

from .interfaces import (
    LogLevel,
    LogType,
    LogRecord,
    LogBackend,
    HFTLoggerInterface
)

from .hft_logger import HFTLogger, LoggingTimer

from .factory import (
    LoggerFactory,
    get_logger,
    get_exchange_logger,
    configure_logging
)

from .structs import (
    LoggingConfig,
    ConsoleBackendConfig,
    FileBackendConfig,
    PerformanceConfig,
    BackendConfig
)

__all__ = [
    'LogLevel',
    'LogType',
    'LogRecord',
    'LogBackend',
    'HFTLoggerInterface',
    'HFTLogger',
    'LoggingTimer',
    'LoggerFactory',
    'get_logger',
    'get_exchange_logger',
    'configure_logging',
    'LoggingConfig',
    'ConsoleBackendConfig',
    'FileBackendConfig',
    'PerformanceConfig',
    'BackendConfig',
]
