from typing import List

from config.structs import ExchangeSourceConfig
from exchanges.base import ConnectionStrategy, SubscriptionStrategy, WebsocketStrategySet, WsMessage, to_pair
from .message_parser import BitgetTickerParser

WS_URL = "wss://ws.bitget.com/v2/ws/public"
HEARTBEAT_INTERVAL = 30.0
BATCH_SIZE = 30


class BitgetConnectionStrategy(ConnectionStrategy):
    """Bitget drops sockets that send no text "ping" for 2 minutes."""

    def create_heartbeat_message(self) -> WsMessage:
        return "ping"


class BitgetSubscriptionStrategy(SubscriptionStrategy):

    def to_venue_symbol(self, symbol: str) -> str:
        return to_pair(symbol, "USDT")

    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        return {
            "op": "subscribe",
            "args": [
                {"instType": "SPOT", "channel": "ticker", "instId": inst_id}
                for inst_id in venue_symbols
            ]
        }


def create_ws_strategies(source: ExchangeSourceConfig) -> WebsocketStrategySet:
    return WebsocketStrategySet(
        connection=BitgetConnectionStrategy(
            source.url or WS_URL,
            source.heartbeat_interval or HEARTBEAT_INTERVAL
        ),
        subscription=BitgetSubscriptionStrategy(
            batch_size=source.batch_size or BATCH_SIZE,
            message_delay=source.subscribe_delay or 0.0
        ),
        parser=BitgetTickerParser()
    )
