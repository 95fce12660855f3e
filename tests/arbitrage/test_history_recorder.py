import pytest

from arbitrage.gap_history import GapHistoryLog
from arbitrage.history_recorder import GapHistoryRecorder
from arbitrage.price_store import PriceStore
from exchanges.structs import ExchangeEnum

from tests.helpers import FakeScheduler, make_ticker


@pytest.fixture
def store():
    store = PriceStore()
    # 0.4% and 1.0% gaps
    store.update(make_ticker(symbol="BTC", exchange=ExchangeEnum.UPBIT, last=50000.0))
    store.update(make_ticker(symbol="BTC", exchange=ExchangeEnum.BINANCE, last=50200.0))
    store.update(make_ticker(symbol="ETH", exchange=ExchangeEnum.UPBIT, last=3000.0))
    store.update(make_ticker(symbol="ETH", exchange=ExchangeEnum.OKX, last=3030.0))
    return store


def test_capture_records_gaps_at_or_above_threshold(store):
    history = GapHistoryLog()
    recorder = GapHistoryRecorder(store, history, FakeScheduler(), min_spread=0.5, clock=lambda: 42.0)

    assert recorder.capture() == 1

    [entry] = history.recent()
    assert entry.symbol == "ETH"
    assert entry.spread == pytest.approx(1.0)
    assert entry.low_exchange == "upbit"
    assert entry.high_exchange == "okx"
    assert entry.timestamp == 42.0


def test_records_of_one_capture_share_timestamp(store):
    history = GapHistoryLog()
    ticks = iter([1.0, 2.0])
    recorder = GapHistoryRecorder(store, history, FakeScheduler(), min_spread=0.0, clock=lambda: next(ticks))

    assert recorder.capture() == 2
    assert {r.timestamp for r in history.recent()} == {1.0}


def test_empty_store_records_nothing():
    history = GapHistoryLog()
    recorder = GapHistoryRecorder(PriceStore(), history, FakeScheduler())
    assert recorder.capture() == 0
    assert history.count() == 0


@pytest.mark.asyncio
async def test_scheduled_every_interval(store):
    scheduler = FakeScheduler()
    history = GapHistoryLog()
    recorder = GapHistoryRecorder(store, history, scheduler, interval=60.0)

    recorder.start()
    [timer] = scheduler.pending(repeat=True)
    assert timer.delay == 60.0

    await scheduler.fire(timer)
    await scheduler.fire(timer)
    assert history.count() == 2

    recorder.stop()
    assert scheduler.pending() == []
