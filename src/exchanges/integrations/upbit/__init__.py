from .message_parser import UpbitTickerParser
from .ws_strategies import UpbitConnectionStrategy, UpbitSubscriptionStrategy, create_ws_strategies
from .market_service import UpbitMarketService

QUOTE_CURRENCY = "KRW"

__all__ = [
    "UpbitTickerParser",
    "UpbitConnectionStrategy",
    "UpbitSubscriptionStrategy",
    "UpbitMarketService",
    "create_ws_strategies",
    "QUOTE_CURRENCY",
]
