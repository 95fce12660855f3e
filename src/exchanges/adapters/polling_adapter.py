"""
REST polling source adapter.

Fetches the venue's full ticker snapshot every poll_interval seconds and
emits the entries in the interest set. There is no socket to lose: a
failed poll is logged and the next tick tries again, so the adapter never
becomes terminal.
"""

import asyncio
from typing import Optional, Sequence

import aiohttp

from exchanges.base import AdapterState, PollingStrategy, QuoteNormalizer
from exchanges.interfaces import SourceAdapter, TickerCallback
from exchanges.structs import AdapterStatus, ExchangeEnum, MarketType, TransportType
from infrastructure.exceptions.exchange import ExchangeRestError
from infrastructure.logging import HFTLoggerInterface, LoggingTimer, get_exchange_logger
from infrastructure.networking.http import RestClient
from infrastructure.utils import Scheduler, TimerHandle


class RestPollingSourceAdapter(SourceAdapter):

    def __init__(
        self,
        exchange: ExchangeEnum,
        market_type: MarketType,
        strategy: PollingStrategy,
        normalizer: QuoteNormalizer,
        rest_client: RestClient,
        scheduler: Scheduler,
        poll_interval: float = 2.0,
        logger: Optional[HFTLoggerInterface] = None,
    ):
        self._state = AdapterState(exchange, market_type, TransportType.REST_POLLING)
        self.strategy = strategy
        self.normalizer = normalizer
        self.rest_client = rest_client
        self.scheduler = scheduler
        self.poll_interval = poll_interval
        self.logger = logger or get_exchange_logger(exchange.value, f"rest.{market_type.value}")

        self._first_poll: Optional[TimerHandle] = None
        self._poll_timer: Optional[TimerHandle] = None
        self.poll_count = 0
        self.failed_polls = 0

    @property
    def exchange(self) -> ExchangeEnum:
        return self._state.exchange

    @property
    def market_type(self) -> MarketType:
        return self._state.market_type

    @property
    def is_connected(self) -> bool:
        return self._state.connected

    def on_ticker(self, callback: TickerCallback) -> None:
        self._state.set_callback(callback)

    def get_status(self) -> AdapterStatus:
        return self._state.status()

    async def connect(self) -> None:
        if self._state.connected:
            return
        self._state.connected = True
        self._first_poll = self.scheduler.call_later(0, self._poll)
        self._poll_timer = self.scheduler.call_every(self.poll_interval, self._poll)
        self.logger.info("Polling started",
                         endpoint=self.strategy.endpoint,
                         interval=self.poll_interval)

    async def subscribe(self, symbols: Sequence[str]) -> None:
        added = self._state.replace_symbols(symbols)
        self.logger.info("Interest set replaced",
                         symbols=len(self._state.symbols),
                         added=len(added))

    async def disconnect(self) -> None:
        for timer in (self._first_poll, self._poll_timer):
            if timer is not None:
                timer.cancel()
        self._first_poll = None
        self._poll_timer = None

        await self.rest_client.close()
        if self._state.connected:
            self.logger.info("Polling stopped", polls=self.poll_count, failed=self.failed_polls)
        self._state.connected = False

    async def _poll(self) -> None:
        if not self._state.connected or not self._state.symbols:
            return

        self.poll_count += 1
        try:
            payload = await self.rest_client.get(self.strategy.endpoint, params=self.strategy.params)
        except (ExchangeRestError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.failed_polls += 1
            self.logger.warning("Snapshot fetch failed", endpoint=self.strategy.endpoint, error=str(e))
            return

        emitted = 0
        with LoggingTimer(self.logger, "snapshot_processing") as timer:
            for quote in self.strategy.parse_snapshot(payload):
                if not self._state.wants(quote.symbol):
                    continue
                try:
                    ticker = self.normalizer.normalize(quote, self._state.next_timestamp())
                    self._state.emit(ticker)
                    emitted += 1
                except Exception as e:
                    self.logger.error("Failed to process quote", symbol=quote.symbol, error=str(e))

        self.logger.debug("Snapshot processed", emitted=emitted, elapsed_ms=round(timer.elapsed_ms, 2))
