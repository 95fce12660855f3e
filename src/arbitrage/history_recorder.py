import time
from typing import Callable, Optional

from exchanges.structs import GapRecord
from infrastructure.logging import get_logger
from infrastructure.utils import Scheduler, TimerHandle
from .gap_detector import detect_gaps
from .gap_history import GapHistoryLog
from .price_store import PriceStore


class GapHistoryRecorder:
    """
    Periodically appends every gap with spread >= min_spread to the history log.

    All records of one capture share the capture timestamp.
    """

    def __init__(
        self,
        store: PriceStore,
        history: GapHistoryLog,
        scheduler: Scheduler,
        interval: float = 60.0,
        min_spread: float = 0.5,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.history = history
        self.scheduler = scheduler
        self.interval = interval
        self.min_spread = min_spread
        self.clock = clock
        self._timer: Optional[TimerHandle] = None
        self.logger = get_logger("arbitrage.history_recorder")

    def start(self) -> None:
        if self._timer is None or not self._timer.active:
            self._timer = self.scheduler.call_every(self.interval, self.record)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def capture(self) -> int:
        """Run one capture now; returns the number of records appended."""
        now = self.clock()
        saved = 0
        for gap in detect_gaps(self.store.snapshot_all()):
            if gap.spread < self.min_spread:
                continue
            self.history.append(GapRecord(
                symbol=gap.symbol,
                spread=gap.spread,
                low_exchange=gap.low.exchange.value,
                high_exchange=gap.high.exchange.value,
                timestamp=now
            ))
            saved += 1

        if saved:
            self.logger.info("Gap history recorded", saved=saved, total=self.history.count())
        return saved

    async def record(self) -> None:
        self.capture()
