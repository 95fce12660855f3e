from .structs import (
    AppConfig, WebSocketConfig, ReconnectConfig, ExchangeSourceConfig,
    SymbolUniverseConfig, RateConfig, PriceStoreConfig, GapHistoryConfig, StreamConfig
)
from .config_manager import load_config, parse_config, substitute_env_vars, load_env_file

__all__ = [
    "AppConfig",
    "WebSocketConfig",
    "ReconnectConfig",
    "ExchangeSourceConfig",
    "SymbolUniverseConfig",
    "RateConfig",
    "PriceStoreConfig",
    "GapHistoryConfig",
    "StreamConfig",
    "load_config",
    "parse_config",
    "substitute_env_vars",
    "load_env_file",
]
