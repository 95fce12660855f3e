from .message_parser import BitgetTickerParser
from .ws_strategies import BitgetConnectionStrategy, BitgetSubscriptionStrategy, create_ws_strategies
from .rest_strategies import BitgetPollingStrategy, create_polling_strategy

QUOTE_CURRENCY = "USDT"

__all__ = [
    "BitgetTickerParser",
    "BitgetConnectionStrategy",
    "BitgetSubscriptionStrategy",
    "BitgetPollingStrategy",
    "create_ws_strategies",
    "create_polling_strategy",
    "QUOTE_CURRENCY",
]
