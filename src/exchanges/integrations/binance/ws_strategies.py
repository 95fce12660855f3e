from typing import List, Sequence

from config.structs import ExchangeSourceConfig
from exchanges.base import ConnectionStrategy, SubscriptionStrategy, WebsocketStrategySet, WsMessage, to_pair
from exchanges.structs import MarketType
from .message_parser import BinanceTickerParser

SPOT_WS_URL = "wss://stream.binance.com:9443/ws/!ticker@arr"
FUTURES_WS_URL = "wss://fstream.binance.com/ws/!ticker@arr"

MARK_PRICE_STREAM = "!markPrice@arr"


class BinanceConnectionStrategy(ConnectionStrategy):
    """All-market stream URL; protocol pings are answered by the websockets library."""


class BinanceSubscriptionStrategy(SubscriptionStrategy):
    """
    The all-market ticker stream needs no per-symbol subscription; the
    interest set is applied by the adapter. Futures additionally subscribe
    the all-market mark price stream for funding data.
    """

    def __init__(self, with_funding: bool = False):
        super().__init__()
        self.with_funding = with_funding

    def to_venue_symbol(self, symbol: str) -> str:
        return to_pair(symbol, "USDT")

    def _create_batch_message(self, venue_symbols: List[str]) -> WsMessage:
        return {"method": "SUBSCRIBE", "params": [MARK_PRICE_STREAM], "id": 1}

    def create_subscription_messages(self, symbols: Sequence[str]) -> List[WsMessage]:
        if not self.with_funding or not symbols:
            return []
        return [self._create_batch_message([])]


def create_ws_strategies(source: ExchangeSourceConfig) -> WebsocketStrategySet:
    futures = source.market_type != MarketType.SPOT
    default_url = FUTURES_WS_URL if futures else SPOT_WS_URL
    return WebsocketStrategySet(
        connection=BinanceConnectionStrategy(source.url or default_url, source.heartbeat_interval),
        subscription=BinanceSubscriptionStrategy(with_funding=futures),
        parser=BinanceTickerParser()
    )
