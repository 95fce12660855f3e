from .adapter_state import AdapterState
from .retry_policy import RetryPolicy
from .normalizer import QuoteNormalizer, COMPARISON_CURRENCY
from .strategies import (
    ConnectionContext, ConnectionStrategy, SubscriptionStrategy, TickerParser,
    PollingStrategy, WebsocketStrategySet, WsMessage
)
from .symbols import to_pair, from_pair, from_prefixed_pair

__all__ = [
    "AdapterState",
    "RetryPolicy",
    "QuoteNormalizer",
    "COMPARISON_CURRENCY",
    "ConnectionContext",
    "ConnectionStrategy",
    "SubscriptionStrategy",
    "TickerParser",
    "PollingStrategy",
    "WebsocketStrategySet",
    "WsMessage",
    "to_pair",
    "from_pair",
    "from_prefixed_pair",
]
