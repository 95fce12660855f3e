import pytest

from arbitrage.gap_history import GapHistoryLog
from exchanges.structs import GapRecord


def record(symbol="BTC", spread=1.0, timestamp=0.0):
    return GapRecord(symbol=symbol, spread=spread, low_exchange="upbit",
                     high_exchange="binance", timestamp=timestamp)


def test_capacity_evicts_oldest():
    history = GapHistoryLog(max_size=10000)
    for i in range(10005):
        history.append(record(timestamp=float(i)))

    assert history.count() == 10000
    recent = history.recent(limit=10000)
    assert recent[0].timestamp == 5.0
    assert recent[-1].timestamp == 10004.0


def test_recent_returns_tail_oldest_first():
    history = GapHistoryLog(max_size=10)
    for i in range(5):
        history.append(record(timestamp=float(i)))

    assert [r.timestamp for r in history.recent(limit=3)] == [2.0, 3.0, 4.0]
    assert history.recent(limit=0) == []
    assert len(history.recent()) == 5


def test_by_symbol():
    history = GapHistoryLog()
    history.append(record("BTC", timestamp=1.0))
    history.append(record("ETH", timestamp=2.0))
    history.append(record("BTC", timestamp=3.0))
    history.append(record("BTC", timestamp=4.0))

    assert [r.timestamp for r in history.by_symbol("btc")] == [1.0, 3.0, 4.0]
    assert [r.timestamp for r in history.by_symbol("BTC", limit=2)] == [3.0, 4.0]
    assert history.by_symbol("DOGE") == []


def test_stats():
    history = GapHistoryLog(max_size=3)
    for _ in range(5):
        history.append(record())
    assert history.stats() == {"total": 3, "max_size": 3}


@pytest.mark.parametrize("max_size", [0, -1])
def test_invalid_capacity(max_size):
    with pytest.raises(ValueError):
        GapHistoryLog(max_size=max_size)
