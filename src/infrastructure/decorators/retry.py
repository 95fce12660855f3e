"""
Retry Decorators

Retry decorators for the one-shot REST lookups the system makes (KuCoin
websocket token, conversion rate, ticker snapshots).

Key Features:
- Configurable backoff strategies (fixed, linear, exponential)
- Rate-limit errors wait longer than connection errors
- Anything not listed is raised immediately
"""

import asyncio
import logging
from functools import wraps
from typing import Tuple, Type, Callable, Any, Optional

import aiohttp

from ..exceptions.exchange import (
    RateLimitErrorRest, ExchangeConnectionRestError, ExchangeServerError
)

logger = logging.getLogger(__name__)


def compute_delay(backoff: str, attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay before retry number `attempt` (1-based)."""
    if backoff == "exponential":
        return min(base_delay * (2 ** (attempt - 1)), max_delay)
    if backoff == "linear":
        return min(base_delay * attempt, max_delay)
    return base_delay


def retry_decorator(
    max_attempts: int = 3,
    backoff: str = "exponential",
    base_delay: float = 0.1,
    max_delay: float = 5.0,
    exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    rate_limit_exceptions: Tuple[Type[Exception], ...] = (RateLimitErrorRest,)
):
    """
    Configurable retry decorator for async REST calls.

    Args:
        max_attempts: Maximum attempts including the first call (default: 3)
        backoff: Backoff strategy - "exponential", "linear", "fixed"
        base_delay: Base delay in seconds (default: 0.1)
        max_delay: Maximum delay cap in seconds (default: 5.0)
        exceptions: Network/connection exceptions to retry
        rate_limit_exceptions: Rate limit exceptions (retried with a longer delay)

    Returns:
        Decorated async function with retry logic
    """
    if backoff not in ("exponential", "linear", "fixed"):
        raise ValueError(f"Unknown backoff strategy: {backoff}")

    if exceptions is None:
        exceptions = (
            aiohttp.ClientConnectionError,
            asyncio.TimeoutError,
            ExchangeConnectionRestError,
            ExchangeServerError
        )

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except rate_limit_exceptions as e:
                    if attempt == max_attempts:
                        raise
                    retry_after = getattr(e, "retry_after", None)
                    delay = retry_after or min(compute_delay(backoff, attempt + 1, base_delay, max_delay) * 2, max_delay)
                    logger.warning(f"Rate limit hit in {func.__name__} on attempt {attempt}, waiting {delay}s")
                    await asyncio.sleep(delay)
                except exceptions as e:
                    if attempt == max_attempts:
                        raise
                    delay = compute_delay(backoff, attempt, base_delay, max_delay)
                    logger.debug(f"{func.__name__} failed on attempt {attempt}, retrying in {delay}s: {e}")
                    await asyncio.sleep(delay)

        return wrapper
    return decorator
