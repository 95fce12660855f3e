from .message_parser import MexcTickerParser
from .rest_strategies import MexcPollingStrategy, create_polling_strategy

QUOTE_CURRENCY = "USDT"

__all__ = [
    "MexcTickerParser",
    "MexcPollingStrategy",
    "create_polling_strategy",
    "QUOTE_CURRENCY",
]
