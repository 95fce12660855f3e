"""
Source manager.

Registry of source adapters keyed by (exchange, market type) and the single
fan-in point for their ticks. Every adapter's on_ticker is wired to one
internal dispatcher that forwards to the downstream sink, so consumers see
one stream regardless of how many adapters are registered.

Bulk operations isolate adapters from each other: one adapter failing to
connect, subscribe or disconnect is logged and never stops the rest.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from exchanges.interfaces import SourceAdapter, TickerCallback
from exchanges.structs import ExchangeEnum, ManagerStatus, MarketType, NormalizedTicker
from infrastructure.logging import get_logger

AdapterKey = Tuple[ExchangeEnum, MarketType]


class SourceManager:

    def __init__(self):
        self._adapters: Dict[AdapterKey, SourceAdapter] = {}
        self._sink: Optional[TickerCallback] = None
        self.sink_errors = 0
        self.logger = get_logger("arbitrage.source_manager")

    def register(self, adapter: SourceAdapter) -> bool:
        """Add an adapter; a second adapter for the same pair is ignored."""
        key = (adapter.exchange, adapter.market_type)
        if key in self._adapters:
            self.logger.warning("Adapter already registered, ignoring duplicate",
                                exchange=adapter.exchange.value,
                                market_type=adapter.market_type.value)
            return False

        self._adapters[key] = adapter
        adapter.on_ticker(self._dispatch)
        self.logger.info("Adapter registered",
                         exchange=adapter.exchange.value,
                         market_type=adapter.market_type.value)
        return True

    def get_adapter(self, exchange: ExchangeEnum, market_type: MarketType) -> Optional[SourceAdapter]:
        return self._adapters.get((exchange, market_type))

    @property
    def adapters(self) -> List[SourceAdapter]:
        return list(self._adapters.values())

    def on_ticker(self, callback: TickerCallback) -> None:
        """Set the single downstream sink; replaces any previous one."""
        self._sink = callback

    def _dispatch(self, ticker: NormalizedTicker) -> None:
        sink = self._sink
        if sink is None:
            return
        try:
            sink(ticker)
        except Exception as e:
            # A faulty consumer must not break the adapter's read loop
            self.sink_errors += 1
            self.logger.error("Ticker sink failed",
                              key=ticker.key,
                              error_type=type(e).__name__,
                              error=str(e))

    async def _for_each(self, operation: str, action: Callable[[SourceAdapter], Awaitable[None]]) -> int:
        adapters = self.adapters
        results = await asyncio.gather(*(action(a) for a in adapters), return_exceptions=True)

        failures = 0
        for adapter, result in zip(adapters, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                failures += 1
                self.logger.error(f"Adapter {operation} failed",
                                  exchange=adapter.exchange.value,
                                  market_type=adapter.market_type.value,
                                  error_type=type(result).__name__,
                                  error=str(result))
        return failures

    async def connect_all(self) -> None:
        """Connect every adapter concurrently; returns once every attempt has settled."""
        failures = await self._for_each("connect", lambda a: a.connect())
        status = self.get_status()
        self.logger.info("Connect complete",
                         connected=status.connected_count,
                         total=status.total_adapters,
                         failed=failures)

    async def subscribe_all(self, symbols: Sequence[str]) -> None:
        symbols = list(symbols)
        await self._for_each("subscribe", lambda a: a.subscribe(symbols))
        self.logger.info("Symbol universe broadcast", symbols=len(symbols), adapters=len(self._adapters))

    async def subscribe(self, exchange: ExchangeEnum, market_type: MarketType, symbols: Sequence[str]) -> bool:
        """Replace the interest set of one adapter; False when it is not registered."""
        adapter = self.get_adapter(exchange, market_type)
        if adapter is None:
            self.logger.warning("Subscribe for unregistered adapter",
                                exchange=exchange.value,
                                market_type=market_type.value)
            return False
        await adapter.subscribe(list(symbols))
        return True

    async def disconnect_all(self) -> None:
        """Best effort; individual failures are logged and ignored."""
        await self._for_each("disconnect", lambda a: a.disconnect())
        self.logger.info("All adapters disconnected", total=len(self._adapters))

    def get_status(self) -> ManagerStatus:
        statuses = [adapter.get_status() for adapter in self._adapters.values()]
        return ManagerStatus(
            total_adapters=len(statuses),
            connected_count=sum(1 for s in statuses if s.connected),
            adapters=statuses
        )
