from .message_parser import KucoinTickerParser
from .ws_strategies import KucoinConnectionStrategy, KucoinSubscriptionStrategy, create_ws_strategies

QUOTE_CURRENCY = "USDT"

__all__ = [
    "KucoinTickerParser",
    "KucoinConnectionStrategy",
    "KucoinSubscriptionStrategy",
    "create_ws_strategies",
    "QUOTE_CURRENCY",
]
