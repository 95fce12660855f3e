from typing import Any, List, Optional, Union

from exchanges.base import TickerParser, from_pair
from exchanges.structs import AssetName, VenueQuote


class OkxTickerParser(TickerParser):
    """OKX v5 public tickers channel: {"arg": {...}, "data": [{instId, last, bidPx, askPx, vol24h}]}."""

    exchange_name = "okx"

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_pair(venue_symbol, "USDT", separator="-")

    def _is_control_frame(self, raw: Union[str, bytes]) -> bool:
        return raw == "pong" or raw == b"pong"

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if not isinstance(payload, dict) or "event" in payload:
            return []  # subscribe ack or error
        data = payload.get("data")
        if not data:
            return []

        quotes = []
        for item in data:
            symbol = self.from_venue_symbol(item.get("instId"))
            last = self._float(item.get("last"))
            if symbol is None or not last:
                continue
            quotes.append(VenueQuote(
                symbol=symbol,
                last=last,
                bid=self._float(item.get("bidPx")),
                ask=self._float(item.get("askPx")),
                volume_24h=self._float(item.get("vol24h"))
            ))
        return quotes
