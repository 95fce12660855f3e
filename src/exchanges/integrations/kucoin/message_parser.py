from typing import Any, List, Optional

from exchanges.base import TickerParser, from_pair
from exchanges.structs import AssetName, VenueQuote

TICKER_TOPIC_PREFIX = "/market/ticker:"


class KucoinTickerParser(TickerParser):
    """
    KuCoin /market/ticker:<pair> pushes.

    The pair is only in the topic. data.size is the size of the last trade,
    not a 24h volume, so volume_24h stays unset.
    """

    exchange_name = "kucoin"

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_pair(venue_symbol, "USDT", separator="-")

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if not isinstance(payload, dict) or payload.get("type") != "message":
            return []  # welcome, ack, pong
        topic = payload.get("topic") or ""
        if not topic.startswith(TICKER_TOPIC_PREFIX):
            return []

        data = payload["data"]
        symbol = self.from_venue_symbol(topic[len(TICKER_TOPIC_PREFIX):])
        last = self._float(data.get("price"))
        if symbol is None or not last:
            return []
        return [VenueQuote(
            symbol=symbol,
            last=last,
            bid=self._float(data.get("bestBid")),
            ask=self._float(data.get("bestAsk"))
        )]
