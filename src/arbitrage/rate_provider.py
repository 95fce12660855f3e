"""
Conversion rates into the comparison currency (KRW).

One USD/KRW lookup at startup, or whenever fetch_rates() is called again;
USDT/KRW is derived from it with a small discount. A failed lookup keeps
the previously held (or default) rates: a stale rate is preferable to
blocking startup. Rates are never refreshed automatically.
"""

import asyncio
from typing import Dict, Optional

import aiohttp

from config.structs import RateConfig
from exchanges.interfaces import RateSource
from infrastructure.exceptions.exchange import ExchangeRestError, RateFetchError
from infrastructure.logging import get_logger
from infrastructure.networking.http import RestClient, RestConfig


class RateProvider(RateSource):

    def __init__(self, config: Optional[RateConfig] = None, rest_client: Optional[RestClient] = None):
        self.config = config or RateConfig()
        self.rest_client = rest_client or RestClient(
            config=RestConfig(timeout=self.config.timeout, max_retries=1),
            name="rates"
        )
        self.logger = get_logger("arbitrage.rate_provider")

        self._rates: Dict[str, float] = {}
        self._set_usd_krw(self.config.default_usd_krw)
        self.last_fetch_ok = False

    def _set_usd_krw(self, usd_krw: float) -> None:
        self._rates = {
            "USD/KRW": usd_krw,
            "USDT/KRW": usd_krw * self.config.usdt_discount,
        }

    async def _fetch_usd_krw(self) -> float:
        try:
            payload = await self.rest_client.get(self.config.url)
        except (ExchangeRestError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RateFetchError(f"Rate lookup failed: {e}")

        try:
            usd_krw = float(payload["rates"]["KRW"])
        except (KeyError, TypeError, ValueError) as e:
            raise RateFetchError(f"Unusable rate payload: {e}")
        if usd_krw <= 0:
            raise RateFetchError(f"Non-positive USD/KRW rate: {usd_krw}")
        return usd_krw

    async def fetch_rates(self) -> bool:
        """One lookup; returns False (and keeps current rates) on failure."""
        try:
            usd_krw = await self._fetch_usd_krw()
        except RateFetchError as e:
            self.last_fetch_ok = False
            self.logger.warning("Using previous conversion rates",
                                error=str(e),
                                usd_krw=self._rates["USD/KRW"],
                                usdt_krw=self._rates["USDT/KRW"])
            return False

        self._set_usd_krw(usd_krw)
        self.last_fetch_ok = True
        self.logger.info("Conversion rates loaded",
                         usd_krw=self._rates["USD/KRW"],
                         usdt_krw=self._rates["USDT/KRW"])
        return True

    def rate(self, currency_pair: str) -> float:
        """
        Held rate for "BASE/QUOTE"; X/X is 1.0.

        Raises:
            KeyError: pair neither held nor the inverse of a held pair
        """
        base, _, quote = currency_pair.upper().partition("/")
        if base == quote:
            return 1.0
        pair = f"{base}/{quote}"
        if pair in self._rates:
            return self._rates[pair]
        inverse = f"{quote}/{base}"
        if inverse in self._rates:
            return 1.0 / self._rates[inverse]
        raise KeyError(pair)

    def convert(self, amount: float, currency: str, to: str = "KRW") -> float:
        return amount * self.rate(f"{currency}/{to}")

    def rates(self) -> Dict[str, float]:
        return dict(self._rates)

    async def close(self) -> None:
        await self.rest_client.close()
