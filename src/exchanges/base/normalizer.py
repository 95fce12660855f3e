from exchanges.interfaces import RateSource
from exchanges.structs import ExchangeEnum, MarketType, NormalizedTicker, VenueQuote

COMPARISON_CURRENCY = "KRW"


class QuoteNormalizer:
    """
    Converts VenueQuote into NormalizedTicker in the comparison currency.

    The rate is read from the rate source on every call, so a refreshed
    rate applies to the next message without rebuilding adapters. Missing
    bid/ask fall back to last.
    """

    def __init__(self, exchange: ExchangeEnum, market_type: MarketType,
                 quote_currency: str, rate_source: RateSource):
        self.exchange = exchange
        self.market_type = market_type
        self.quote_currency = quote_currency.upper()
        self.rate_source = rate_source
        self._pair = f"{self.quote_currency}/{COMPARISON_CURRENCY}"

    def conversion_rate(self) -> float:
        if self.quote_currency == COMPARISON_CURRENCY:
            return 1.0
        return self.rate_source.rate(self._pair)

    def normalize(self, quote: VenueQuote, timestamp: float) -> NormalizedTicker:
        rate = self.conversion_rate()
        bid = quote.bid if quote.bid else quote.last
        ask = quote.ask if quote.ask else quote.last

        return NormalizedTicker(
            exchange=self.exchange,
            market_type=self.market_type,
            symbol=quote.symbol,
            base_currency=self.quote_currency,
            bid=bid * rate,
            ask=ask * rate,
            last=quote.last * rate,
            timestamp=timestamp,
            bid_original=bid,
            ask_original=ask,
            last_original=quote.last,
            volume_24h=quote.volume_24h,
            funding_rate=quote.funding_rate,
            next_funding_time=quote.next_funding_time,
            open_interest=quote.open_interest
        )
