from .message_parser import GateioTickerParser
from .ws_strategies import GateioConnectionStrategy, GateioSubscriptionStrategy, create_ws_strategies
from .rest_strategies import GateioPollingStrategy, create_polling_strategy

QUOTE_CURRENCY = "USDT"

__all__ = [
    "GateioTickerParser",
    "GateioConnectionStrategy",
    "GateioSubscriptionStrategy",
    "GateioPollingStrategy",
    "create_ws_strategies",
    "create_polling_strategy",
    "QUOTE_CURRENCY",
]
