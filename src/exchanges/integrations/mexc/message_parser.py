from typing import Any, List, Optional

from exchanges.base import TickerParser, from_pair
from exchanges.structs import AssetName, VenueQuote


class MexcTickerParser(TickerParser):
    """
    MEXC spot tickers from the REST snapshot (/api/v3/ticker/24hr).

    MEXC's public websocket serves protobuf frames only, so the venue is
    polled instead of streamed.
    """

    exchange_name = "mexc"

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_pair(venue_symbol, "USDT")

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if not isinstance(payload, list):
            return []  # error envelope

        quotes = []
        for item in payload:
            symbol = self.from_venue_symbol(item.get("symbol"))
            last = self._float(item.get("lastPrice"))
            if symbol is None or not last:
                continue
            quotes.append(VenueQuote(
                symbol=symbol,
                last=last,
                bid=self._float(item.get("bidPrice")),
                ask=self._float(item.get("askPrice")),
                volume_24h=self._float(item.get("volume"))
            ))
        return quotes
