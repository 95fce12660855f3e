from .message_parser import OkxTickerParser
from .ws_strategies import OkxConnectionStrategy, OkxSubscriptionStrategy, create_ws_strategies

QUOTE_CURRENCY = "USDT"

__all__ = [
    "OkxTickerParser",
    "OkxConnectionStrategy",
    "OkxSubscriptionStrategy",
    "create_ws_strategies",
    "QUOTE_CURRENCY",
]
