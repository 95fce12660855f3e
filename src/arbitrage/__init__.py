"""
Spread engine.

- SourceManager: adapter registry and single tick fan-in
- PriceStore: latest quote per (symbol, exchange, market type)
- gap_detector: pure spread computation over store snapshots
- GapHistoryLog / GapHistoryRecorder: bounded log of significant gaps
- RateProvider: conversion rates into KRW
- TickerBatcher: one coalesced batch per flush interval
- SpreadMonitor: wires everything together
"""

from .price_store import PriceStore, price_key
from .gap_detector import (
    detect_gaps, filter_gaps, sort_gaps, build_opportunity, classify_gap, DEFAULT_NOTIONAL
)
from .gap_history import GapHistoryLog
from .rate_provider import RateProvider
from .source_manager import SourceManager
from .ticker_batcher import TickerBatcher
from .history_recorder import GapHistoryRecorder
from .monitor import SpreadMonitor

__all__ = [
    "PriceStore",
    "price_key",
    "detect_gaps",
    "filter_gaps",
    "sort_gaps",
    "build_opportunity",
    "classify_gap",
    "DEFAULT_NOTIONAL",
    "GapHistoryLog",
    "RateProvider",
    "SourceManager",
    "TickerBatcher",
    "GapHistoryRecorder",
    "SpreadMonitor",
]
