from config.structs import ExchangeSourceConfig
from exchanges.base import PollingStrategy
from .message_parser import MexcTickerParser

REST_URL = "https://api.mexc.com"
TICKERS_ENDPOINT = "/api/v3/ticker/24hr"


class MexcPollingStrategy(PollingStrategy):
    """GET /api/v3/ticker/24hr without a symbol returns every spot ticker."""

    def __init__(self, base_url: str = REST_URL):
        super().__init__(MexcTickerParser(), f"{base_url.rstrip('/')}{TICKERS_ENDPOINT}")


def create_polling_strategy(source: ExchangeSourceConfig) -> PollingStrategy:
    return MexcPollingStrategy(source.rest_url or REST_URL)
