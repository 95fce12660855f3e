from typing import Any, List, Optional

from exchanges.base import TickerParser, from_prefixed_pair
from exchanges.structs import AssetName, VenueQuote


class UpbitTickerParser(TickerParser):
    """
    Upbit ticker frames (sent as binary JSON), quoted in KRW.

    The ticker type has no order book fields; bid/ask fall back to
    trade_price during normalization.
    """

    exchange_name = "upbit"

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_prefixed_pair(venue_symbol, "KRW")

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if not isinstance(payload, dict) or payload.get("type") != "ticker":
            return []
        symbol = self.from_venue_symbol(payload["code"])
        last = self._float(payload["trade_price"])
        if symbol is None or not last:
            return []
        return [VenueQuote(
            symbol=symbol,
            last=last,
            volume_24h=self._float(payload.get("acc_trade_volume_24h"))
        )]
