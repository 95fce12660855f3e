"""
Test doubles and builders shared across the suite.
"""

from pathlib import Path
from typing import List, Optional, Sequence

from exchanges.interfaces import RateSource, SourceAdapter, TickerCallback
from exchanges.structs import AdapterStatus, ExchangeEnum, MarketType, NormalizedTicker
from infrastructure.utils import Scheduler, TimerHandle

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeTimer(TimerHandle):

    def __init__(self, delay: float, callback, repeat: bool):
        self.delay = delay
        self.callback = callback
        self.repeat = repeat
        self.cancelled = False
        self.fired = 0

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled and (self.repeat or self.fired == 0)


class FakeScheduler(Scheduler):
    """Records timers; tests fire them explicitly."""

    def __init__(self):
        self.timers: List[FakeTimer] = []

    def call_later(self, delay: float, callback) -> TimerHandle:
        timer = FakeTimer(delay, callback, repeat=False)
        self.timers.append(timer)
        return timer

    def call_every(self, interval: float, callback) -> TimerHandle:
        timer = FakeTimer(interval, callback, repeat=True)
        self.timers.append(timer)
        return timer

    def pending(self, repeat: Optional[bool] = None) -> List[FakeTimer]:
        return [t for t in self.timers
                if t.active and (repeat is None or t.repeat == repeat)]

    async def fire(self, timer: FakeTimer) -> None:
        timer.fired += 1
        await timer.callback()

    async def fire_pending_once(self) -> int:
        """Fire every active one-shot timer; returns how many fired."""
        timers = self.pending(repeat=False)
        for timer in timers:
            await self.fire(timer)
        return len(timers)


class StaticRates(RateSource):

    def __init__(self, usdt_krw: float = 1000.0):
        self.rates = {"USDT/KRW": usdt_krw, "USD/KRW": usdt_krw}

    def rate(self, currency_pair: str) -> float:
        base, _, quote = currency_pair.partition("/")
        if base == quote:
            return 1.0
        return self.rates[currency_pair]


class StubAdapter(SourceAdapter):
    """In-memory source; push() delivers a ticker as if it came off the wire."""

    def __init__(self, exchange=ExchangeEnum.UPBIT, market_type=MarketType.SPOT, fail_connect=False):
        self._exchange = exchange
        self._market_type = market_type
        self.fail_connect = fail_connect
        self.connected = False
        self.symbols: List[str] = []
        self.callback = None
        self.disconnect_calls = 0

    @property
    def exchange(self) -> ExchangeEnum:
        return self._exchange

    @property
    def market_type(self) -> MarketType:
        return self._market_type

    async def connect(self) -> None:
        if self.fail_connect:
            raise ConnectionError("refused")
        self.connected = True

    async def subscribe(self, symbols: Sequence[str]) -> None:
        self.symbols = list(symbols)

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.connected = False

    def on_ticker(self, callback: TickerCallback) -> None:
        self.callback = callback

    def get_status(self) -> AdapterStatus:
        return AdapterStatus(
            exchange=self._exchange,
            market_type=self._market_type,
            connected=self.connected,
            subscribed_symbol_count=len(self.symbols)
        )

    def push(self, ticker) -> None:
        self.callback(ticker)


def make_ticker(
    symbol: str = "BTC",
    exchange: ExchangeEnum = ExchangeEnum.BINANCE,
    market_type: MarketType = MarketType.SPOT,
    last: float = 50000.0,
    volume_24h: Optional[float] = None,
    timestamp: float = 1_700_000_000.0,
    funding_rate: Optional[float] = None,
) -> NormalizedTicker:
    return NormalizedTicker(
        exchange=exchange,
        market_type=market_type,
        symbol=symbol,
        base_currency="KRW",
        bid=last,
        ask=last,
        last=last,
        timestamp=timestamp,
        last_original=last,
        volume_24h=volume_24h,
        funding_rate=funding_rate
    )


def load_fixture(name: str) -> bytes:
    return (FIXTURES_DIR / name).read_bytes()
