"""
Cross-venue gap detection.

Pure functions over a PriceStore snapshot. detect_gaps() yields one
GapResult per symbol quoted on at least two sources: the cheapest and the
most expensive `last`, the spread between them in percent, and the market
pairing. Filtering and ordering are left to callers; filter_gaps() and
sort_gaps() implement the usual conventions.
"""

import time
import uuid
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Union

from exchanges.structs import (
    ArbitrageOpportunity, ExchangeEnum, GapResult, GapType, MarketType, NormalizedTicker
)

DEFAULT_NOTIONAL = 1_000_000.0

Snapshot = Union[Mapping[str, NormalizedTicker], Iterable[NormalizedTicker]]


def classify_gap(low: NormalizedTicker, high: NormalizedTicker) -> GapType:
    low_spot = low.market_type == MarketType.SPOT
    high_spot = high.market_type == MarketType.SPOT
    if low_spot and high_spot:
        return GapType.SPOT_SPOT
    if not low_spot and not high_spot:
        return GapType.FUTURES_FUTURES
    return GapType.SPOT_FUTURES


def detect_gaps(snapshot: Snapshot) -> List[GapResult]:
    """
    One GapResult per symbol with two or more entries.

    Symbols whose cheapest `last` is not positive are skipped: the spread
    is undefined there.
    """
    tickers = snapshot.values() if isinstance(snapshot, Mapping) else snapshot

    groups: Dict[str, List[NormalizedTicker]] = defaultdict(list)
    for ticker in tickers:
        groups[ticker.symbol].append(ticker)

    gaps = []
    for symbol, group in groups.items():
        if len(group) < 2:
            continue
        ordered = sorted(group, key=lambda t: t.last)
        low, high = ordered[0], ordered[-1]
        if low.last <= 0:
            continue

        gaps.append(GapResult(
            symbol=symbol,
            low=low,
            high=high,
            spread=(high.last - low.last) / low.last * 100,
            gap_type=classify_gap(low, high),
            aggregate_volume=sum(t.volume_24h or 0.0 for t in group)
        ))
    return gaps


def filter_gaps(
    gaps: Iterable[GapResult],
    min_spread: float = 0.0,
    exchanges: Optional[Iterable[Union[ExchangeEnum, str]]] = None,
    gap_types: Optional[Iterable[GapType]] = None,
) -> List[GapResult]:
    """
    Keep gaps with spread >= min_spread whose low and high legs are both on
    an allowed exchange (all exchanges when `exchanges` is None).
    """
    allowed = None
    if exchanges is not None:
        allowed = {e.value if isinstance(e, ExchangeEnum) else str(e).lower() for e in exchanges}
    types = set(gap_types) if gap_types is not None else None

    result = []
    for gap in gaps:
        if gap.spread < min_spread:
            continue
        if allowed is not None and (gap.low.exchange.value not in allowed
                                    or gap.high.exchange.value not in allowed):
            continue
        if types is not None and gap.gap_type not in types:
            continue
        result.append(gap)
    return result


def sort_gaps(gaps: Iterable[GapResult]) -> List[GapResult]:
    """Widest spread first."""
    return sorted(gaps, key=lambda g: g.spread, reverse=True)


def build_opportunity(gap: GapResult, notional: float = DEFAULT_NOTIONAL,
                      timestamp: Optional[float] = None) -> ArbitrageOpportunity:
    """
    Buy the low leg, sell the high leg.

    estimated_profit is notional * spread / 100 in the comparison currency,
    before fees and transfer costs. funding_rate comes from the non-spot
    leg when there is one.
    """
    low, high = gap.low, gap.high
    funding_rate = None
    for leg in (high, low):
        if leg.market_type != MarketType.SPOT and leg.funding_rate is not None:
            funding_rate = leg.funding_rate
            break

    return ArbitrageOpportunity(
        id=uuid.uuid4().hex,
        symbol=gap.symbol,
        gap_type=gap.gap_type,
        buy_exchange=low.exchange,
        buy_market_type=low.market_type,
        buy_price=low.last,
        buy_currency=low.base_currency,
        sell_exchange=high.exchange,
        sell_market_type=high.market_type,
        sell_price=high.last,
        sell_currency=high.base_currency,
        spread=gap.spread,
        notional=notional,
        estimated_profit=notional * gap.spread / 100,
        timestamp=timestamp if timestamp is not None else time.time(),
        buy_price_original=low.last_original,
        sell_price_original=high.last_original,
        funding_rate=funding_rate
    )
