"""
Pytest configuration and shared fixtures.

Quiet test logging plus the scheduler and rate doubles used by the
adapter and engine tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Configure test environment
os.environ['ENVIRONMENT'] = 'test'

from infrastructure.logging.factory import LoggerFactory
from infrastructure.logging.hft_logger import HFTLogger
from infrastructure.logging.structs import LoggingConfig, ConsoleBackendConfig, PerformanceConfig

TEST_LOGGING = LoggingConfig(
    environment="test",
    console=ConsoleBackendConfig(enabled=True, min_level="WARNING", color=False),
    performance=PerformanceConfig(buffer_size=100, batch_size=1, dispatch_interval=0.001)
)

# Module-level loggers are created at import time, before any fixture runs
LoggerFactory.configure(TEST_LOGGING)

from tests.helpers import FakeScheduler, StaticRates


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up test-appropriate logging configuration."""
    LoggerFactory.configure(TEST_LOGGING)
    yield
    LoggerFactory.clear_cache()


@pytest.fixture(autouse=True)
def detach_log_dispatch():
    """Each async test runs its own loop; drop dispatch tasks bound to the old one."""
    yield
    for logger in list(HFTLogger._instances):
        logger._dispatch_task = None
        logger._shutdown_event = None


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def static_rates():
    return StaticRates()
