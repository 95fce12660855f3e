from typing import Callable, Dict, List, Optional

from exchanges.structs import NormalizedTicker
from infrastructure.logging import get_logger
from infrastructure.utils import Scheduler, TimerHandle

BatchSink = Callable[[List[NormalizedTicker]], None]


class TickerBatcher:
    """
    Coalesces accepted ticks and releases them once per flush_interval.

    Within one interval only the latest tick per price key is kept; keys
    keep the order they were first seen in. Empty intervals emit nothing.
    """

    def __init__(self, sink: BatchSink, scheduler: Scheduler, flush_interval: float = 1.0):
        self.sink = sink
        self.scheduler = scheduler
        self.flush_interval = flush_interval
        self._pending: Dict[str, NormalizedTicker] = {}
        self._timer: Optional[TimerHandle] = None
        self.batches_sent = 0
        self.logger = get_logger("arbitrage.ticker_batcher")

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def add(self, ticker: NormalizedTicker) -> None:
        self._pending[ticker.key] = ticker

    def start(self) -> None:
        if self._timer is None or not self._timer.active:
            self._timer = self.scheduler.call_every(self.flush_interval, self.flush)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def flush(self) -> None:
        if not self._pending:
            return
        batch = list(self._pending.values())
        self._pending = {}
        self.batches_sent += 1
        try:
            self.sink(batch)
        except Exception as e:
            self.logger.error("Batch sink failed", size=len(batch), error_type=type(e).__name__, error=str(e))
