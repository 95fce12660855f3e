import pytest

from arbitrage.source_manager import SourceManager
from exchanges.structs import ExchangeEnum, MarketType

from tests.helpers import StubAdapter, make_ticker


@pytest.fixture
def manager():
    return SourceManager()


class TestRegistration:

    def test_duplicate_pair_is_ignored(self, manager):
        first = StubAdapter()
        assert manager.register(first) is True
        assert manager.register(StubAdapter()) is False

        assert manager.adapters == [first]
        assert manager.get_adapter(ExchangeEnum.UPBIT, MarketType.SPOT) is first

    def test_same_exchange_other_market_is_distinct(self, manager):
        assert manager.register(StubAdapter(ExchangeEnum.BINANCE, MarketType.SPOT))
        assert manager.register(StubAdapter(ExchangeEnum.BINANCE, MarketType.FUTURES))
        assert len(manager.adapters) == 2

    def test_get_unknown_adapter(self, manager):
        assert manager.get_adapter(ExchangeEnum.OKX, MarketType.SPOT) is None


class TestFanIn:

    def test_ticks_from_every_adapter_reach_the_sink(self, manager):
        upbit, okx = StubAdapter(ExchangeEnum.UPBIT), StubAdapter(ExchangeEnum.OKX)
        manager.register(upbit)
        manager.register(okx)
        received = []
        manager.on_ticker(received.append)

        upbit.push(make_ticker(exchange=ExchangeEnum.UPBIT))
        okx.push(make_ticker(exchange=ExchangeEnum.OKX))

        assert [t.exchange for t in received] == [ExchangeEnum.UPBIT, ExchangeEnum.OKX]

    def test_sink_set_after_registration(self, manager):
        adapter = StubAdapter()
        manager.register(adapter)
        adapter.push(make_ticker())  # no sink yet: dropped

        received = []
        manager.on_ticker(received.append)
        adapter.push(make_ticker())
        assert len(received) == 1

    def test_sink_failure_is_contained(self, manager):
        adapter = StubAdapter()
        manager.register(adapter)

        def faulty(ticker):
            raise RuntimeError("consumer bug")

        manager.on_ticker(faulty)
        adapter.push(make_ticker())
        adapter.push(make_ticker())

        assert manager.sink_errors == 2


class TestBulkOperations:

    @pytest.mark.asyncio
    async def test_one_failed_connect_does_not_block_others(self, manager):
        good = StubAdapter(ExchangeEnum.UPBIT)
        bad = StubAdapter(ExchangeEnum.KUCOIN, fail_connect=True)
        manager.register(good)
        manager.register(bad)

        await manager.connect_all()

        status = manager.get_status()
        assert status.total_adapters == 2
        assert status.connected_count == 1
        assert good.connected and not bad.connected

    @pytest.mark.asyncio
    async def test_subscribe_all_broadcasts(self, manager):
        adapters = [StubAdapter(ExchangeEnum.UPBIT), StubAdapter(ExchangeEnum.BYBIT)]
        for adapter in adapters:
            manager.register(adapter)

        await manager.subscribe_all(["BTC", "ETH"])

        assert all(a.symbols == ["BTC", "ETH"] for a in adapters)

    @pytest.mark.asyncio
    async def test_subscribe_single_adapter(self, manager):
        upbit, okx = StubAdapter(ExchangeEnum.UPBIT), StubAdapter(ExchangeEnum.OKX)
        manager.register(upbit)
        manager.register(okx)

        assert await manager.subscribe(ExchangeEnum.OKX, MarketType.SPOT, ["XRP"]) is True
        assert await manager.subscribe(ExchangeEnum.MEXC, MarketType.SPOT, ["XRP"]) is False
        assert okx.symbols == ["XRP"]
        assert upbit.symbols == []

    @pytest.mark.asyncio
    async def test_disconnect_all(self, manager):
        adapters = [StubAdapter(ExchangeEnum.UPBIT), StubAdapter(ExchangeEnum.OKX)]
        for adapter in adapters:
            manager.register(adapter)
        await manager.connect_all()

        await manager.disconnect_all()

        assert manager.get_status().connected_count == 0
        assert all(a.disconnect_calls == 1 for a in adapters)

    def test_status_of_empty_manager(self, manager):
        status = manager.get_status()
        assert status.total_adapters == 0
        assert status.connected_count == 0
        assert status.adapters == []
