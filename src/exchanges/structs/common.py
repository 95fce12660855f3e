from typing import Optional, List

from msgspec import Struct

from .enums import ExchangeEnum, MarketType, GapType
from .types import AssetName


class NormalizedTicker(Struct, frozen=True):
    """
    One observation of one instrument on one exchange/market.

    bid/ask/last are already converted into the comparison currency (KRW).
    The *_original fields hold the values before conversion, in
    base_currency. timestamp is ingestion time in epoch seconds.
    """
    exchange: ExchangeEnum
    market_type: MarketType
    symbol: AssetName
    base_currency: str
    bid: float
    ask: float
    last: float
    timestamp: float
    bid_original: Optional[float] = None
    ask_original: Optional[float] = None
    last_original: Optional[float] = None
    volume_24h: Optional[float] = None
    funding_rate: Optional[float] = None
    next_funding_time: Optional[float] = None
    open_interest: Optional[float] = None

    @property
    def key(self) -> str:
        """PriceStore key: symbol|exchange|market_type."""
        return f"{self.symbol}|{self.exchange.value}|{self.market_type.value}"

    @property
    def source(self) -> str:
        """Short source label used in grouped views: exchange-market_type."""
        return f"{self.exchange.value}-{self.market_type.value}"


class VenueQuote(Struct, frozen=True):
    """
    Quote as parsed from a venue payload, before currency conversion.

    Parsers produce these; the adapter's normalizer turns them into
    NormalizedTicker.
    """
    symbol: AssetName
    last: float
    bid: Optional[float] = None
    ask: Optional[float] = None
    volume_24h: Optional[float] = None
    funding_rate: Optional[float] = None
    next_funding_time: Optional[float] = None
    open_interest: Optional[float] = None


class AdapterStatus(Struct, frozen=True):
    """Read-only snapshot of one adapter."""
    exchange: ExchangeEnum
    market_type: MarketType
    connected: bool
    subscribed_symbol_count: int
    last_update_timestamp: Optional[float] = None
    transport: Optional[str] = None
    reconnect_attempts: int = 0
    reconnect_exhausted: bool = False


class ManagerStatus(Struct, frozen=True):
    """Aggregated status of every registered adapter."""
    total_adapters: int
    connected_count: int
    adapters: List[AdapterStatus]


class GapResult(Struct, frozen=True):
    """Cheapest and most expensive quote for one symbol, with spread in percent."""
    symbol: AssetName
    low: NormalizedTicker
    high: NormalizedTicker
    spread: float
    gap_type: GapType
    aggregate_volume: float


class GapRecord(Struct, frozen=True):
    """History entry for a significant gap."""
    symbol: AssetName
    spread: float
    low_exchange: str
    high_exchange: str
    timestamp: float


class ArbitrageOpportunity(Struct, frozen=True):
    """
    Buy-low/sell-high view of a gap with an estimated profit for a notional.

    Prices are in the comparison currency; *_original prices are in the
    currency each venue quotes in.
    """
    id: str
    symbol: AssetName
    gap_type: GapType
    buy_exchange: ExchangeEnum
    buy_market_type: MarketType
    buy_price: float
    buy_currency: str
    sell_exchange: ExchangeEnum
    sell_market_type: MarketType
    sell_price: float
    sell_currency: str
    spread: float
    notional: float
    estimated_profit: float
    timestamp: float
    buy_price_original: Optional[float] = None
    sell_price_original: Optional[float] = None
    funding_rate: Optional[float] = None
