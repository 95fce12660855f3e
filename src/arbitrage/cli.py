#!/usr/bin/env python3
"""
Spread monitor entry point.

Starts every configured source, then logs the widest cross-venue gaps
every report interval until interrupted.

Examples:
  spread-monitor
  spread-monitor --config config.yaml --symbols BTC,ETH,XRP
  spread-monitor --min-spread 1.0 --report-interval 10
"""

import argparse
import asyncio
import signal
import sys
from typing import List, Optional

from config import load_config
from config.structs import AppConfig
from infrastructure.exceptions.system import ConfigurationError
from infrastructure.logging import HFTLogger, configure_logging, get_logger
from .monitor import SpreadMonitor


class SpreadMonitorCLI:
    """Command-line interface for the spread monitor."""

    def __init__(self):
        self.monitor: Optional[SpreadMonitor] = None
        self.logger = get_logger("arbitrage.cli")
        self._shutdown_event = asyncio.Event()

    def setup_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._shutdown_event.set)
            except NotImplementedError:
                # Windows event loops: KeyboardInterrupt still ends the run
                pass

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        parser = argparse.ArgumentParser(
            prog="spread-monitor",
            description="Cross-exchange crypto spread monitor",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None
        )
        parser.add_argument(
            "--config",
            type=str,
            default=None,
            help="Path to config.yaml (default: search cwd and project root)"
        )
        parser.add_argument(
            "--symbols",
            type=str,
            help="Comma-separated canonical symbols, e.g. BTC,ETH (overrides config)"
        )
        parser.add_argument(
            "--min-spread",
            type=float,
            default=0.5,
            help="Minimum spread in percent for reported gaps (default: 0.5)"
        )
        parser.add_argument(
            "--report-interval",
            type=float,
            default=30.0,
            help="Seconds between gap reports (default: 30)"
        )
        parser.add_argument(
            "--top",
            type=int,
            default=10,
            help="Number of gaps per report (default: 10)"
        )
        return parser.parse_args(argv)

    def report(self, min_spread: float, top: int) -> None:
        status = self.monitor.status()
        gaps = self.monitor.gaps(min_spread=min_spread, limit=top)
        self.logger.info("Spread report",
                         connected=status.connected_count,
                         adapters=status.total_adapters,
                         prices=self.monitor.store.count(),
                         gaps=len(gaps))
        for rank, gap in enumerate(gaps, 1):
            self.logger.info(f"#{rank} {gap.symbol}",
                             spread=round(gap.spread, 3),
                             gap_type=gap.gap_type.value,
                             buy=gap.low.source,
                             buy_price=gap.low.last,
                             sell=gap.high.source,
                             sell_price=gap.high.last)

    async def run(self, config: AppConfig, args: argparse.Namespace) -> None:
        symbols = [s.strip() for s in args.symbols.split(",")] if args.symbols else None
        self.monitor = SpreadMonitor(config)
        try:
            await self.monitor.start(symbols)
            while not self._shutdown_event.is_set():
                try:
                    await asyncio.wait_for(self._shutdown_event.wait(), timeout=args.report_interval)
                except asyncio.TimeoutError:
                    self.report(args.min_spread, args.top)
        finally:
            await self.monitor.stop()

    async def main(self, argv: Optional[List[str]] = None) -> int:
        args = self.parse_args(argv)

        try:
            config = load_config(args.config)
        except ConfigurationError as e:
            self.logger.error("Configuration error", error=str(e))
            await HFTLogger.shutdown_all()
            return 2

        if config.logging:
            configure_logging(config.logging)
            self.logger = get_logger("arbitrage.cli")

        self.setup_signal_handlers()
        try:
            await self.run(config, args)
        except KeyboardInterrupt:
            self.logger.info("Shutdown requested by user")
        finally:
            await HFTLogger.shutdown_all()
        return 0


def main() -> None:
    """Console script entry point."""
    cli = SpreadMonitorCLI()
    try:
        sys.exit(asyncio.run(cli.main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
