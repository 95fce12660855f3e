from typing import List, Optional

from exchanges.base import from_prefixed_pair
from infrastructure.logging import get_exchange_logger
from infrastructure.networking.http import RestClient

MARKETS_URL = "https://api.upbit.com/v1/market/all"


class UpbitMarketService:
    """Lists the canonical symbols of every KRW market listed on Upbit."""

    def __init__(self, rest_client: Optional[RestClient] = None, url: str = MARKETS_URL):
        self.rest_client = rest_client or RestClient(name="upbit.markets")
        self.url = url
        self.logger = get_exchange_logger("upbit", "markets")

    async def fetch_krw_symbols(self) -> List[str]:
        """
        Raises:
            ExchangeRestError: market list request failed
        """
        markets = await self.rest_client.get(self.url)
        symbols = sorted({
            symbol for symbol in (from_prefixed_pair(m.get("market"), "KRW") for m in markets or [])
            if symbol is not None
        })
        self.logger.info("KRW markets loaded", count=len(symbols), sample=symbols[:5])
        return symbols

    async def close(self) -> None:
        await self.rest_client.close()
