"""
Spread monitor.

Wires the pipeline together:

    adapters -> SourceManager -> PriceStore -> (pull) GapDetector
                              -> TickerBatcher -> batch sink
    PriceStore -> GapHistoryRecorder -> GapHistoryLog (every record_interval)

start() runs the startup sequence: rates, symbol universe, adapters,
connect, subscribe, then the periodic jobs. Queries are pull-based and can
be called at any time after construction.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

from config.structs import AppConfig
from exchanges.integrations.upbit import UpbitMarketService
from exchanges.registry import AdapterDependencies, create_adapters
from exchanges.structs import (
    ExchangeEnum, GapRecord, GapResult, GapType, ManagerStatus, NormalizedTicker
)
from infrastructure.exceptions.exchange import ExchangeRestError
from infrastructure.logging import get_logger
from infrastructure.utils import AsyncioScheduler, Scheduler
from .gap_detector import detect_gaps, filter_gaps, sort_gaps
from .gap_history import GapHistoryLog
from .history_recorder import GapHistoryRecorder
from .price_store import PriceStore
from .rate_provider import RateProvider
from .source_manager import SourceManager
from .ticker_batcher import BatchSink, TickerBatcher


class SpreadMonitor:

    def __init__(
        self,
        config: AppConfig,
        scheduler: Optional[Scheduler] = None,
        rate_provider: Optional[RateProvider] = None,
        batch_sink: Optional[BatchSink] = None,
    ):
        self.config = config
        self.scheduler = scheduler or AsyncioScheduler("monitor")
        self.logger = get_logger("arbitrage.monitor")

        self.rates = rate_provider or RateProvider(config.rates)
        self.store = PriceStore(config.price_store)
        self.history = GapHistoryLog(config.gap_history.max_size)
        self.manager = SourceManager()

        self.batcher = TickerBatcher(
            batch_sink or self._log_batch, self.scheduler, config.stream.flush_interval
        )
        self.recorder = GapHistoryRecorder(
            self.store, self.history, self.scheduler,
            interval=config.gap_history.record_interval,
            min_spread=config.gap_history.min_spread
        )
        self.manager.on_ticker(self._on_ticker)

        self.symbols: List[str] = []
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def _on_ticker(self, ticker: NormalizedTicker) -> None:
        if self.store.update(ticker):
            self.batcher.add(ticker)

    def _log_batch(self, batch: List[NormalizedTicker]) -> None:
        self.logger.debug("Price batch", size=len(batch))

    async def resolve_symbols(self, symbols: Optional[Sequence[str]] = None) -> List[str]:
        """
        Explicit symbols win; otherwise the Upbit KRW market list when
        enabled, falling back to the configured universe.
        """
        if symbols:
            return [s.strip().upper() for s in symbols if s and s.strip()]

        universe = self.config.universe
        if universe.fetch_upbit_markets:
            service = UpbitMarketService(url=universe.upbit_markets_url)
            try:
                fetched = await service.fetch_krw_symbols()
                if fetched:
                    return fetched
            except ExchangeRestError as e:
                self.logger.warning("Upbit market list unavailable, using configured symbols", error=str(e))
            finally:
                await service.close()
        return [s.upper() for s in universe.symbols]

    def register_adapters(self) -> int:
        deps = AdapterDependencies(
            rate_source=self.rates,
            scheduler=self.scheduler,
            ws_config=self.config.websocket,
            reconnect_config=self.config.reconnect
        )
        registered = 0
        for adapter in create_adapters(self.config.enabled_sources(), deps):
            if self.manager.register(adapter):
                registered += 1
        return registered

    async def start(self, symbols: Optional[Sequence[str]] = None) -> None:
        if self._running:
            return

        await self.rates.fetch_rates()
        self.symbols = await self.resolve_symbols(symbols)

        registered = self.register_adapters()
        self.logger.info("Starting spread monitor", adapters=registered, symbols=len(self.symbols))

        await self.manager.connect_all()
        await self.manager.subscribe_all(self.symbols)

        self.batcher.start()
        self.recorder.start()
        self._running = True

    async def stop(self) -> None:
        self.batcher.stop()
        self.recorder.stop()
        await self.manager.disconnect_all()
        await self.rates.close()
        if isinstance(self.scheduler, AsyncioScheduler):
            await self.scheduler.shutdown()
        if self._running:
            self.logger.info("Spread monitor stopped", prices=self.store.count(), history=self.history.count())
        self._running = False

    async def refresh_rates(self) -> bool:
        return await self.rates.fetch_rates()

    # Queries

    def prices(self) -> Dict[str, Dict[str, NormalizedTicker]]:
        return self.store.snapshot_by_symbol()

    def gaps(
        self,
        min_spread: float = 0.0,
        exchanges: Optional[Iterable[Union[ExchangeEnum, str]]] = None,
        limit: Optional[int] = None,
        gap_types: Optional[Iterable[GapType]] = None,
    ) -> List[GapResult]:
        """Current gaps, widest first."""
        gaps = sort_gaps(filter_gaps(detect_gaps(self.store.snapshot_all()), min_spread, exchanges, gap_types))
        return gaps[:limit] if limit is not None else gaps

    def history_recent(self, limit: int = 100) -> List[GapRecord]:
        return self.history.recent(limit)

    def history_by_symbol(self, symbol: str, limit: int = 100) -> List[GapRecord]:
        return self.history.by_symbol(symbol, limit)

    def history_stats(self) -> Dict[str, int]:
        return self.history.stats()

    def status(self) -> ManagerStatus:
        return self.manager.get_status()

    def stats(self) -> Dict[str, int]:
        stats = self.store.stats()
        stats["sink_errors"] = self.manager.sink_errors
        stats["batches_sent"] = self.batcher.batches_sent
        return stats
