from typing import List

from config.structs import ExchangeSourceConfig
from exchanges.base import ConnectionStrategy, SubscriptionStrategy, WebsocketStrategySet, WsMessage, to_pair
from exchanges.structs import MarketType
from .message_parser import BybitTickerParser, TICKER_TOPIC_PREFIX

SPOT_WS_URL = "wss://stream.bybit.com/v5/public/spot"
LINEAR_WS_URL = "wss://stream.bybit.com/v5/public/linear"
HEARTBEAT_INTERVAL = 20.0
# Spot rejects subscribe requests with more than 10 args
BATCH_SIZE = 10


class BybitConnectionStrategy(ConnectionStrategy):

    def create_heartbeat_message(self) -> WsMessage:
        return {"op": "ping"}


class BybitSubscriptionStrategy(SubscriptionStrategy):

    def to_venue_symbol(self, symbol: str) -> str:
        return to_pair(symbol, "USDT")

    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        return {
            "op": "subscribe",
            "args": [f"{TICKER_TOPIC_PREFIX}{s}" for s in venue_symbols]
        }


def create_ws_strategies(source: ExchangeSourceConfig) -> WebsocketStrategySet:
    default_url = SPOT_WS_URL if source.market_type == MarketType.SPOT else LINEAR_WS_URL
    return WebsocketStrategySet(
        connection=BybitConnectionStrategy(
            source.url or default_url,
            source.heartbeat_interval or HEARTBEAT_INTERVAL
        ),
        subscription=BybitSubscriptionStrategy(
            batch_size=source.batch_size or BATCH_SIZE,
            message_delay=source.subscribe_delay or 0.0
        ),
        parser=BybitTickerParser()
    )
