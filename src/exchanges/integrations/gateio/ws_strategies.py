import time
from typing import List

from config.structs import ExchangeSourceConfig
from exchanges.base import ConnectionStrategy, SubscriptionStrategy, WebsocketStrategySet, WsMessage, to_pair
from .message_parser import GateioTickerParser, TICKERS_CHANNEL

WS_URL = "wss://api.gateio.ws/ws/v4/"
HEARTBEAT_INTERVAL = 30.0
BATCH_SIZE = 100


class GateioConnectionStrategy(ConnectionStrategy):
    """Gate.io expects an application-level spot.ping every 30 seconds."""

    def create_heartbeat_message(self) -> WsMessage:
        return {"time": int(time.time()), "channel": "spot.ping"}


class GateioSubscriptionStrategy(SubscriptionStrategy):

    def to_venue_symbol(self, symbol: str) -> str:
        return to_pair(symbol, "USDT", separator="_")

    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        return {
            "time": int(time.time()),
            "channel": TICKERS_CHANNEL,
            "event": "subscribe",
            "payload": venue_symbols
        }


def create_ws_strategies(source: ExchangeSourceConfig) -> WebsocketStrategySet:
    return WebsocketStrategySet(
        connection=GateioConnectionStrategy(
            source.url or WS_URL,
            source.heartbeat_interval or HEARTBEAT_INTERVAL
        ),
        subscription=GateioSubscriptionStrategy(
            batch_size=source.batch_size or BATCH_SIZE,
            message_delay=source.subscribe_delay or 0.0
        ),
        parser=GateioTickerParser()
    )
