"""
Source registry.

Maps configured (exchange, market type, transport) triples onto venue
integration modules and assembles adapters from them. Integration modules
are imported lazily, so an unused venue costs nothing at startup.
"""

import importlib
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from config.structs import ExchangeSourceConfig, ReconnectConfig, WebSocketConfig
from exchanges.adapters import RestPollingSourceAdapter, WebsocketSourceAdapter
from exchanges.base import QuoteNormalizer
from exchanges.interfaces import RateSource, SourceAdapter
from exchanges.structs import ExchangeEnum, MarketType, TransportType
from infrastructure.exceptions.system import ConfigurationError
from infrastructure.logging import get_logger
from infrastructure.networking.http import RestClient
from infrastructure.utils import AsyncioScheduler, Scheduler

logger = get_logger('exchanges.registry')

SourceKey = Tuple[ExchangeEnum, MarketType, TransportType]

_INTEGRATIONS: Dict[SourceKey, str] = {
    (ExchangeEnum.UPBIT, MarketType.SPOT, TransportType.WEBSOCKET): "exchanges.integrations.upbit",
    (ExchangeEnum.BINANCE, MarketType.SPOT, TransportType.WEBSOCKET): "exchanges.integrations.binance",
    (ExchangeEnum.BINANCE, MarketType.FUTURES, TransportType.WEBSOCKET): "exchanges.integrations.binance",
    (ExchangeEnum.BYBIT, MarketType.SPOT, TransportType.WEBSOCKET): "exchanges.integrations.bybit",
    (ExchangeEnum.BYBIT, MarketType.PERPETUAL, TransportType.WEBSOCKET): "exchanges.integrations.bybit",
    (ExchangeEnum.OKX, MarketType.SPOT, TransportType.WEBSOCKET): "exchanges.integrations.okx",
    (ExchangeEnum.MEXC, MarketType.SPOT, TransportType.REST_POLLING): "exchanges.integrations.mexc",
    (ExchangeEnum.GATEIO, MarketType.SPOT, TransportType.WEBSOCKET): "exchanges.integrations.gateio",
    (ExchangeEnum.GATEIO, MarketType.SPOT, TransportType.REST_POLLING): "exchanges.integrations.gateio",
    (ExchangeEnum.BITGET, MarketType.SPOT, TransportType.WEBSOCKET): "exchanges.integrations.bitget",
    (ExchangeEnum.BITGET, MarketType.SPOT, TransportType.REST_POLLING): "exchanges.integrations.bitget",
    (ExchangeEnum.KUCOIN, MarketType.SPOT, TransportType.WEBSOCKET): "exchanges.integrations.kucoin",
}


@dataclass
class AdapterDependencies:
    """Shared collaborators handed to every adapter the registry builds."""
    rate_source: RateSource
    scheduler: Scheduler = field(default_factory=AsyncioScheduler)
    ws_config: WebSocketConfig = field(default_factory=WebSocketConfig)
    reconnect_config: ReconnectConfig = field(default_factory=ReconnectConfig)


def supported_sources() -> List[SourceKey]:
    return list(_INTEGRATIONS)


def is_supported(exchange: ExchangeEnum, market_type: MarketType, transport: TransportType) -> bool:
    return (exchange, market_type, transport) in _INTEGRATIONS


def _load_integration(source: ExchangeSourceConfig):
    key = (source.exchange, source.market_type, source.transport)
    module_path = _INTEGRATIONS.get(key)
    if module_path is None:
        raise ConfigurationError(
            f"Unsupported source: {source.exchange.value} {source.market_type.value} "
            f"over {source.transport.value}",
            setting_name="exchanges"
        )
    return importlib.import_module(module_path)


def create_adapter(source: ExchangeSourceConfig, deps: AdapterDependencies) -> SourceAdapter:
    """
    Build the adapter for one configured source.

    Raises:
        ConfigurationError: no integration for the (exchange, market, transport) triple
    """
    integration = _load_integration(source)
    normalizer = QuoteNormalizer(
        source.exchange, source.market_type, integration.QUOTE_CURRENCY, deps.rate_source
    )

    if source.transport == TransportType.REST_POLLING:
        adapter = RestPollingSourceAdapter(
            exchange=source.exchange,
            market_type=source.market_type,
            strategy=integration.create_polling_strategy(source),
            normalizer=normalizer,
            rest_client=RestClient(name=f"{source.exchange.value}.poll"),
            scheduler=deps.scheduler,
            poll_interval=source.poll_interval,
        )
    else:
        adapter = WebsocketSourceAdapter(
            exchange=source.exchange,
            market_type=source.market_type,
            strategies=integration.create_ws_strategies(source),
            normalizer=normalizer,
            scheduler=deps.scheduler,
            ws_config=deps.ws_config,
            reconnect_config=source.reconnect or deps.reconnect_config,
        )

    logger.debug("Adapter created",
                 exchange=source.exchange.value,
                 market_type=source.market_type.value,
                 transport=source.transport.value)
    return adapter


def create_adapters(sources: List[ExchangeSourceConfig], deps: AdapterDependencies,
                    skip_unsupported: bool = True) -> List[SourceAdapter]:
    """
    Build adapters for every enabled source.

    Unsupported sources are logged and skipped unless skip_unsupported is
    False, in which case the ConfigurationError propagates.
    """
    adapters = []
    for source in sources:
        if not source.enabled:
            continue
        try:
            adapters.append(create_adapter(source, deps))
        except ConfigurationError as e:
            if not skip_unsupported:
                raise
            logger.warning("Skipping source", error=str(e))
    return adapters
