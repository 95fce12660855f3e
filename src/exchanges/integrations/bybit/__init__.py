from .message_parser import BybitTickerParser
from .ws_strategies import BybitConnectionStrategy, BybitSubscriptionStrategy, create_ws_strategies

QUOTE_CURRENCY = "USDT"

__all__ = [
    "BybitTickerParser",
    "BybitConnectionStrategy",
    "BybitSubscriptionStrategy",
    "create_ws_strategies",
    "QUOTE_CURRENCY",
]
