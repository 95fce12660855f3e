from typing import Any, Dict, List, Optional

from exchanges.base import TickerParser, from_pair
from exchanges.structs import AssetName, VenueQuote

TICKERS_CHANNEL = "spot.tickers"


class GateioTickerParser(TickerParser):
    """
    Gate.io v4 spot.tickers updates and the /spot/tickers REST snapshot.

    Both carry the same ticker object (currency_pair, last, highest_bid,
    lowest_ask, base_volume); the websocket wraps one of them in an
    update envelope, REST returns a list.
    """

    exchange_name = "gateio"

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_pair(venue_symbol, "USDT", separator="_")

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if isinstance(payload, list):
            items = payload
        elif isinstance(payload, dict):
            if payload.get("channel") != TICKERS_CHANNEL or payload.get("event") != "update":
                return []  # spot.pong, subscribe ack
            items = [payload["result"]]
        else:
            return []

        quotes = []
        for item in items:
            quote = self._parse_ticker(item)
            if quote is not None:
                quotes.append(quote)
        return quotes

    def _parse_ticker(self, item: Dict[str, Any]) -> Optional[VenueQuote]:
        symbol = self.from_venue_symbol(item.get("currency_pair"))
        last = self._float(item.get("last"))
        if symbol is None or not last:
            return None
        return VenueQuote(
            symbol=symbol,
            last=last,
            bid=self._float(item.get("highest_bid")),
            ask=self._float(item.get("lowest_ask")),
            volume_24h=self._float(item.get("base_volume"))
        )
