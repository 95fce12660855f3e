from typing import Any, List, Optional, Union

from exchanges.base import TickerParser, from_pair
from exchanges.structs import AssetName, VenueQuote


class BitgetTickerParser(TickerParser):
    """
    Bitget v2 ticker channel and the spot tickers REST snapshot.

    Websocket pushes carry instId, the REST snapshot carries symbol; both
    use BTCUSDT notation and the same price fields.
    """

    exchange_name = "bitget"

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_pair(venue_symbol, "USDT")

    def _is_control_frame(self, raw: Union[str, bytes]) -> bool:
        return raw == "pong" or raw == b"pong"

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if not isinstance(payload, dict):
            return []
        # Subscribe acks and errors carry "event" and no data
        data = payload.get("data")
        if not data:
            return []

        quotes = []
        for item in data:
            symbol = self.from_venue_symbol(item.get("instId") or item.get("symbol"))
            last = self._float(item.get("lastPr"))
            if symbol is None or not last:
                continue
            quotes.append(VenueQuote(
                symbol=symbol,
                last=last,
                bid=self._float(item.get("bidPr")),
                ask=self._float(item.get("askPr")),
                volume_24h=self._float(item.get("baseVolume"))
            ))
        return quotes
