from typing import Any, Dict, List, Optional

from exchanges.base import TickerParser, from_pair
from exchanges.structs import AssetName, VenueQuote

TICKER_TOPIC_PREFIX = "tickers."


class BybitTickerParser(TickerParser):
    """
    Bybit v5 public tickers topic, spot and linear.

    Linear pushes a snapshot followed by deltas that only carry the
    changed fields, so the last known fields are kept per symbol and each
    delta is merged over them. Spot pushes full snapshots only.
    """

    exchange_name = "bybit"

    def __init__(self, logger=None):
        super().__init__(logger)
        self._state: Dict[str, Dict[str, Any]] = {}

    def from_venue_symbol(self, venue_symbol: str) -> Optional[AssetName]:
        return from_pair(venue_symbol, "USDT")

    def _parse_payload(self, payload: Any) -> List[VenueQuote]:
        if not isinstance(payload, dict):
            return []
        topic = payload.get("topic")
        if not topic or not topic.startswith(TICKER_TOPIC_PREFIX):
            return []  # pong, subscribe ack

        data = payload["data"]
        venue_symbol = data.get("symbol") or topic[len(TICKER_TOPIC_PREFIX):]
        symbol = self.from_venue_symbol(venue_symbol)
        if symbol is None:
            return []

        if payload.get("type") == "delta":
            fields = self._state.setdefault(venue_symbol, {})
            fields.update(data)
        else:
            fields = dict(data)
            self._state[venue_symbol] = fields

        last = self._float(fields.get("lastPrice"))
        if not last:
            return []

        next_funding = self._float(fields.get("nextFundingTime"))
        return [VenueQuote(
            symbol=symbol,
            last=last,
            bid=self._float(fields.get("bid1Price")),
            ask=self._float(fields.get("ask1Price")),
            volume_24h=self._float(fields.get("volume24h")),
            funding_rate=self._float(fields.get("fundingRate")),
            next_funding_time=next_funding / 1000.0 if next_funding else None,
            open_interest=self._float(fields.get("openInterest"))
        )]
