from typing import List

from config.structs import ExchangeSourceConfig
from exchanges.base import ConnectionStrategy, SubscriptionStrategy, WebsocketStrategySet, WsMessage, to_pair
from .message_parser import OkxTickerParser

WS_URL = "wss://ws.okx.com:8443/ws/v5/public"
# OKX closes sockets idle for 30 seconds
HEARTBEAT_INTERVAL = 25.0


class OkxConnectionStrategy(ConnectionStrategy):

    def create_heartbeat_message(self) -> WsMessage:
        return "ping"


class OkxSubscriptionStrategy(SubscriptionStrategy):

    def to_venue_symbol(self, symbol: str) -> str:
        return to_pair(symbol, "USDT", separator="-")

    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        return {
            "op": "subscribe",
            "args": [{"channel": "tickers", "instId": inst_id} for inst_id in venue_symbols]
        }


def create_ws_strategies(source: ExchangeSourceConfig) -> WebsocketStrategySet:
    return WebsocketStrategySet(
        connection=OkxConnectionStrategy(
            source.url or WS_URL,
            source.heartbeat_interval or HEARTBEAT_INTERVAL
        ),
        subscription=OkxSubscriptionStrategy(
            batch_size=source.batch_size,
            message_delay=source.subscribe_delay or 0.0
        ),
        parser=OkxTickerParser()
    )
