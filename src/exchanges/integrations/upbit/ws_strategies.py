import uuid
from typing import List

from config.structs import ExchangeSourceConfig
from exchanges.base import ConnectionStrategy, SubscriptionStrategy, WebsocketStrategySet, WsMessage
from .message_parser import UpbitTickerParser

WS_URL = "wss://api.upbit.com/websocket/v1"


class UpbitConnectionStrategy(ConnectionStrategy):
    """Upbit answers protocol pings; no application keepalive needed."""


class UpbitSubscriptionStrategy(SubscriptionStrategy):
    """
    Each Upbit request replaces the previous one, so the full interest set
    always goes out in a single message.
    """

    replaces_previous = True

    def to_venue_symbol(self, symbol: str) -> str:
        return f"KRW-{symbol.upper()}"

    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        return [
            {"ticket": uuid.uuid4().hex},
            {"type": "ticker", "codes": venue_symbols, "isOnlyRealtime": True}
        ]


def create_ws_strategies(source: ExchangeSourceConfig) -> WebsocketStrategySet:
    return WebsocketStrategySet(
        connection=UpbitConnectionStrategy(source.url or WS_URL, source.heartbeat_interval),
        subscription=UpbitSubscriptionStrategy(),
        parser=UpbitTickerParser()
    )
