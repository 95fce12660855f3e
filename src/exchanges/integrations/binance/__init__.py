from .message_parser import BinanceTickerParser
from .ws_strategies import BinanceConnectionStrategy, BinanceSubscriptionStrategy, create_ws_strategies

QUOTE_CURRENCY = "USDT"

__all__ = [
    "BinanceTickerParser",
    "BinanceConnectionStrategy",
    "BinanceSubscriptionStrategy",
    "create_ws_strategies",
    "QUOTE_CURRENCY",
]
