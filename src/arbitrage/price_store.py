"""
Latest-price store.

Holds the most recent NormalizedTicker per (symbol, exchange, market type).
Two filters run before a tick is stored:

- block-lists: tickers known to name different assets on different venues
  (globally, or only on one exchange) are never stored
- collision guard: a tick whose `last` deviates from the mean of the other
  stored prices of the same symbol by more than outlier_threshold (5.0 =
  500%) is dropped. This is a heuristic safety valve against symbol-mapping
  collisions (the same ticker naming unrelated assets), not a statistical
  outlier test; ordinary market moves never come close to the threshold.
"""

import random
from typing import Callable, Dict, Optional

from config.structs import PriceStoreConfig
from exchanges.structs import ExchangeEnum, MarketType, NormalizedTicker
from infrastructure.logging import get_logger


def price_key(symbol: str, exchange: ExchangeEnum, market_type: MarketType) -> str:
    return f"{symbol}|{exchange.value}|{market_type.value}"


class PriceStore:

    def __init__(self, config: Optional[PriceStoreConfig] = None,
                 sampler: Callable[[], float] = random.random):
        self.config = config or PriceStoreConfig()
        self._sampler = sampler
        self._blocked = frozenset(s.upper() for s in self.config.blocked_symbols)
        self._excluded = {
            exchange: frozenset(s.upper() for s in symbols)
            for exchange, symbols in self.config.excluded_by_exchange.items()
        }

        self._prices: Dict[str, NormalizedTicker] = {}
        # symbol -> {key: ticker}; keeps the collision guard O(venues)
        self._by_symbol: Dict[str, Dict[str, NormalizedTicker]] = {}

        self._accepted = 0
        self._rejected_blocked = 0
        self._rejected_outlier = 0

        self.logger = get_logger("arbitrage.price_store")

    def update(self, ticker: NormalizedTicker) -> bool:
        """Store the tick unless filtered; returns True when stored."""
        symbol = ticker.symbol
        if symbol in self._blocked or symbol in self._excluded.get(ticker.exchange.value, ()):
            self._rejected_blocked += 1
            return False

        key = ticker.key
        group = self._by_symbol.get(symbol)
        if group:
            others = [t.last for k, t in group.items() if k != key]
            if others:
                mean = sum(others) / len(others)
                if mean and abs(ticker.last - mean) / mean > self.config.outlier_threshold:
                    self._rejected_outlier += 1
                    if self._sampler() < self.config.rejection_log_sample_rate:
                        self.logger.info("Rejected probable symbol collision",
                                         key=key, last=ticker.last, mean=mean,
                                         rejected_total=self._rejected_outlier)
                    return False
        else:
            group = self._by_symbol[symbol] = {}

        self._prices[key] = ticker
        group[key] = ticker
        self._accepted += 1
        return True

    def get(self, symbol: str, exchange: ExchangeEnum, market_type: MarketType) -> Optional[NormalizedTicker]:
        return self._prices.get(price_key(symbol, exchange, market_type))

    def snapshot_all(self) -> Dict[str, NormalizedTicker]:
        """
        Point-in-time copy keyed by "symbol|exchange|market_type".

        Tickers are immutable, so a shallow copy is enough to keep later
        updates out of a snapshot already handed out.
        """
        return dict(self._prices)

    def snapshot_by_symbol(self) -> Dict[str, Dict[str, NormalizedTicker]]:
        """{symbol: {"exchange-market_type": ticker}}"""
        return {
            symbol: {ticker.source: ticker for ticker in group.values()}
            for symbol, group in self._by_symbol.items()
            if group
        }

    def count(self) -> int:
        return len(self._prices)

    def stats(self) -> Dict[str, int]:
        return {
            "total_prices": len(self._prices),
            "symbols": len(self._by_symbol),
            "accepted": self._accepted,
            "rejected_blocked": self._rejected_blocked,
            "rejected_outlier": self._rejected_outlier,
        }
