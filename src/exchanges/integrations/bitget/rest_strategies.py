from config.structs import ExchangeSourceConfig
from exchanges.base import PollingStrategy
from .message_parser import BitgetTickerParser

REST_URL = "https://api.bitget.com"
TICKERS_ENDPOINT = "/api/v2/spot/market/tickers"


class BitgetPollingStrategy(PollingStrategy):
    """GET /api/v2/spot/market/tickers -> {"code": "00000", "data": [...]}"""

    def __init__(self, base_url: str = REST_URL):
        super().__init__(BitgetTickerParser(), f"{base_url.rstrip('/')}{TICKERS_ENDPOINT}")


def create_polling_strategy(source: ExchangeSourceConfig) -> PollingStrategy:
    return BitgetPollingStrategy(source.rest_url or REST_URL)
