from typing import Any, Dict, List, Optional, Tuple

from exchanges.base import TickerParser, from_pair
from exchanges.structs import AssetName, VenueQuote


class BinanceTickerParser(TickerParser):
    """
    Parses the all-market ticker array (!ticker@arr).

    Futures sockets also carry markPriceUpdate arrays; their funding rate
    and next funding time are cached per symbol and attached to the next
    ticker of that symbol.
    """

    exchange_name = "binance"

    def __init__(self, logger=None):
        super().__init__(logger)
        self._funding: Dict[str, Tuple[Optional[float], Optional[float]]] = {}

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_pair(venue_symbol, "USDT")

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if isinstance(payload, dict):
            # Combined-stream envelope or a SUBSCRIBE ack ({"result": null, "id": 1})
            payload = payload.get("data")
            if isinstance(payload, dict):
                payload = [payload]
        if not isinstance(payload, list):
            return []

        quotes = []
        for item in payload:
            event = item.get("e")
            if event == "markPriceUpdate":
                self._cache_funding(item)
            elif event == "24hrTicker":
                quote = self._parse_ticker(item)
                if quote is not None:
                    quotes.append(quote)
        return quotes

    def _cache_funding(self, item: Dict[str, Any]) -> None:
        symbol = self.from_venue_symbol(item["s"])
        if symbol is None:
            return
        next_funding = item.get("T")
        self._funding[symbol] = (
            self._float(item.get("r")),
            next_funding / 1000.0 if next_funding else None
        )

    def _parse_ticker(self, item: Dict[str, Any]) -> Optional[VenueQuote]:
        symbol = self.from_venue_symbol(item["s"])
        if symbol is None:
            return None
        last = self._float(item["c"])
        if not last:
            return None

        funding_rate, next_funding_time = self._funding.get(symbol, (None, None))
        return VenueQuote(
            symbol=symbol,
            last=last,
            bid=self._float(item.get("b")),
            ask=self._float(item.get("a")),
            volume_24h=self._float(item.get("v")),
            funding_rate=funding_rate,
            next_funding_time=next_funding_time
        )
