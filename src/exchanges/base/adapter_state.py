import time
from typing import List, Optional, Sequence

from exchanges.interfaces import TickerCallback
from exchanges.structs import (
    AdapterStatus, ExchangeEnum, MarketType, NormalizedTicker, TransportType
)


class AdapterState:
    """
    Bookkeeping every adapter holds: callback slot, interest set,
    connection flag and last-update time.

    Ingestion timestamps handed out by next_timestamp() never go backwards
    for one adapter, even if the wall clock does.
    """

    __slots__ = ('exchange', 'market_type', 'transport', 'connected',
                 'last_update', '_callback', '_symbols', '_symbol_set', '_last_timestamp')

    def __init__(self, exchange: ExchangeEnum, market_type: MarketType, transport: TransportType):
        self.exchange = exchange
        self.market_type = market_type
        self.transport = transport
        self.connected = False
        self.last_update: Optional[float] = None
        self._callback: Optional[TickerCallback] = None
        self._symbols: List[str] = []
        self._symbol_set = frozenset()
        self._last_timestamp = 0.0

    @property
    def symbols(self) -> List[str]:
        return list(self._symbols)

    def set_callback(self, callback: TickerCallback) -> None:
        self._callback = callback

    def replace_symbols(self, symbols: Sequence[str]) -> List[str]:
        """Replace the interest set; returns the symbols that were not in it before."""
        ordered = list(dict.fromkeys(s.upper() for s in symbols if s))
        added = [s for s in ordered if s not in self._symbol_set]
        self._symbols = ordered
        self._symbol_set = frozenset(ordered)
        return added

    def wants(self, symbol: str) -> bool:
        return symbol in self._symbol_set

    def next_timestamp(self) -> float:
        now = time.time()
        if now < self._last_timestamp:
            now = self._last_timestamp
        self._last_timestamp = now
        return now

    def emit(self, ticker: NormalizedTicker) -> None:
        self.last_update = ticker.timestamp
        if self._callback is not None:
            self._callback(ticker)

    def status(self, reconnect_attempts: int = 0, terminal: bool = False) -> AdapterStatus:
        return AdapterStatus(
            exchange=self.exchange,
            market_type=self.market_type,
            connected=self.connected,
            subscribed_symbol_count=len(self._symbols),
            last_update_timestamp=self.last_update,
            transport=self.transport.value,
            reconnect_attempts=reconnect_attempts,
            reconnect_exhausted=terminal and not self.connected
        )
