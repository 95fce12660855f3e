from .exchange import (
    ExchangeSourceError, TransportError, HandshakeError, AdapterSetupError,
    ParseError, RateFetchError, ExchangeRestError, ExchangeConnectionRestError,
    ExchangeServerError, RateLimitErrorRest
)
from .system import BaseSystemError, ConfigurationError

__all__ = [
    "ExchangeSourceError",
    "TransportError",
    "HandshakeError",
    "AdapterSetupError",
    "ParseError",
    "RateFetchError",
    "ExchangeRestError",
    "ExchangeConnectionRestError",
    "ExchangeServerError",
    "RateLimitErrorRest",
    "BaseSystemError",
    "ConfigurationError",
]
