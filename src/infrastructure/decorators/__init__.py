"""
Infrastructure Decorators

Cross-cutting concerns implemented as decorators: retry logic for REST calls.
"""

from .retry import retry_decorator, compute_delay

__all__ = [
    'retry_decorator',
    'compute_delay'
]
