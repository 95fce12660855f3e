from config.structs import ExchangeSourceConfig
from exchanges.base import PollingStrategy
from .message_parser import GateioTickerParser

REST_URL = "https://api.gateio.ws"
TICKERS_ENDPOINT = "/api/v4/spot/tickers"


class GateioPollingStrategy(PollingStrategy):
    """GET /api/v4/spot/tickers -> [{"currency_pair": "BTC_USDT", ...}, ...]"""

    def __init__(self, base_url: str = REST_URL):
        super().__init__(GateioTickerParser(), f"{base_url.rstrip('/')}{TICKERS_ENDPOINT}")


def create_polling_strategy(source: ExchangeSourceConfig) -> PollingStrategy:
    return GateioPollingStrategy(source.rest_url or REST_URL)
