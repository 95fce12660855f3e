import pytest

from arbitrage.gap_detector import (
    DEFAULT_NOTIONAL, build_opportunity, classify_gap, detect_gaps, filter_gaps, sort_gaps
)
from exchanges.structs import ExchangeEnum, GapType, MarketType

from tests.helpers import make_ticker


def snapshot(*tickers):
    return {t.key: t for t in tickers}


class TestDetectGaps:

    def test_spread_between_cheapest_and_most_expensive(self):
        gaps = detect_gaps(snapshot(
            make_ticker(exchange=ExchangeEnum.UPBIT, last=100.0),
            make_ticker(exchange=ExchangeEnum.BINANCE, last=105.0),
            make_ticker(exchange=ExchangeEnum.OKX, last=102.0),
        ))

        assert len(gaps) == 1
        gap = gaps[0]
        assert gap.symbol == "BTC"
        assert gap.low.exchange == ExchangeEnum.UPBIT
        assert gap.high.exchange == ExchangeEnum.BINANCE
        assert gap.spread == pytest.approx(5.0)
        assert gap.gap_type == GapType.SPOT_SPOT

    def test_single_source_symbol_has_no_gap(self):
        assert detect_gaps(snapshot(make_ticker(symbol="ETH"))) == []

    def test_accepts_plain_iterable(self):
        gaps = detect_gaps([
            make_ticker(exchange=ExchangeEnum.UPBIT, last=50000.0),
            make_ticker(exchange=ExchangeEnum.BYBIT, last=50500.0),
        ])
        assert gaps[0].spread == pytest.approx(1.0)

    def test_non_positive_low_is_skipped(self):
        gaps = detect_gaps(snapshot(
            make_ticker(exchange=ExchangeEnum.UPBIT, last=0.0),
            make_ticker(exchange=ExchangeEnum.BYBIT, last=10.0),
        ))
        assert gaps == []

    def test_equal_prices_give_zero_spread(self):
        gaps = detect_gaps(snapshot(
            make_ticker(exchange=ExchangeEnum.UPBIT, last=10.0),
            make_ticker(exchange=ExchangeEnum.BYBIT, last=10.0),
        ))
        assert gaps[0].spread == 0.0

    def test_aggregate_volume_treats_missing_as_zero(self):
        gaps = detect_gaps(snapshot(
            make_ticker(exchange=ExchangeEnum.UPBIT, last=100.0, volume_24h=2.5),
            make_ticker(exchange=ExchangeEnum.KUCOIN, last=101.0, volume_24h=None),
            make_ticker(exchange=ExchangeEnum.OKX, last=102.0, volume_24h=1.5),
        ))
        assert gaps[0].aggregate_volume == pytest.approx(4.0)

    def test_one_result_per_symbol(self):
        gaps = detect_gaps(snapshot(
            make_ticker(symbol="BTC", exchange=ExchangeEnum.UPBIT, last=100.0),
            make_ticker(symbol="BTC", exchange=ExchangeEnum.OKX, last=101.0),
            make_ticker(symbol="ETH", exchange=ExchangeEnum.UPBIT, last=10.0),
            make_ticker(symbol="ETH", exchange=ExchangeEnum.OKX, last=10.3),
        ))
        assert sorted(g.symbol for g in gaps) == ["BTC", "ETH"]


class TestClassifyGap:

    @pytest.mark.parametrize("low_market,high_market,expected", [
        (MarketType.SPOT, MarketType.SPOT, GapType.SPOT_SPOT),
        (MarketType.SPOT, MarketType.FUTURES, GapType.SPOT_FUTURES),
        (MarketType.PERPETUAL, MarketType.SPOT, GapType.SPOT_FUTURES),
        (MarketType.FUTURES, MarketType.PERPETUAL, GapType.FUTURES_FUTURES),
    ])
    def test_pairing(self, low_market, high_market, expected):
        low = make_ticker(market_type=low_market, last=100.0)
        high = make_ticker(exchange=ExchangeEnum.BYBIT, market_type=high_market, last=101.0)
        assert classify_gap(low, high) == expected


@pytest.fixture
def gaps():
    return detect_gaps(snapshot(
        make_ticker(symbol="BTC", exchange=ExchangeEnum.UPBIT, last=100.0),
        make_ticker(symbol="BTC", exchange=ExchangeEnum.BINANCE, last=100.3),
        make_ticker(symbol="ETH", exchange=ExchangeEnum.UPBIT, last=10.0),
        make_ticker(symbol="ETH", exchange=ExchangeEnum.OKX, last=10.2),
        make_ticker(symbol="XRP", exchange=ExchangeEnum.BYBIT, market_type=MarketType.PERPETUAL, last=1.0),
        make_ticker(symbol="XRP", exchange=ExchangeEnum.BINANCE, last=1.01),
    ))


class TestFilterAndSort:

    def test_min_spread_is_inclusive(self, gaps):
        kept = filter_gaps(gaps, min_spread=1.0)
        assert sorted(g.symbol for g in kept) == ["ETH", "XRP"]

    def test_both_legs_must_be_on_allowed_exchanges(self, gaps):
        kept = filter_gaps(gaps, exchanges=[ExchangeEnum.UPBIT, "binance"])
        assert [g.symbol for g in kept] == ["BTC"]

    def test_gap_type_filter(self, gaps):
        kept = filter_gaps(gaps, gap_types=[GapType.SPOT_FUTURES])
        assert [g.symbol for g in kept] == ["XRP"]

    def test_no_filters_keeps_everything(self, gaps):
        assert len(filter_gaps(gaps)) == 3

    def test_sort_widest_first(self, gaps):
        assert [g.symbol for g in sort_gaps(gaps)] == ["ETH", "XRP", "BTC"]


class TestBuildOpportunity:

    def test_buy_low_sell_high(self):
        gap = detect_gaps([
            make_ticker(exchange=ExchangeEnum.UPBIT, last=50000.0),
            make_ticker(exchange=ExchangeEnum.BINANCE, last=50500.0),
        ])[0]

        opportunity = build_opportunity(gap, timestamp=123.0)

        assert opportunity.buy_exchange == ExchangeEnum.UPBIT
        assert opportunity.sell_exchange == ExchangeEnum.BINANCE
        assert opportunity.notional == DEFAULT_NOTIONAL
        assert opportunity.estimated_profit == pytest.approx(10_000.0)
        assert opportunity.timestamp == 123.0
        assert opportunity.funding_rate is None
        assert opportunity.id

    def test_funding_from_derivative_leg(self):
        gap = detect_gaps([
            make_ticker(exchange=ExchangeEnum.UPBIT, last=100.0),
            make_ticker(exchange=ExchangeEnum.BYBIT, market_type=MarketType.PERPETUAL,
                        last=102.0, funding_rate=0.0001),
        ])[0]

        opportunity = build_opportunity(gap, notional=500_000)

        assert opportunity.gap_type == GapType.SPOT_FUTURES
        assert opportunity.funding_rate == 0.0001
        assert opportunity.estimated_profit == pytest.approx(10_000.0)
