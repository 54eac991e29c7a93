"""Rate limiting adapters.

The service starts with an in-memory limiter; the abstraction lets a shared
store replace it without changing the HTTP layer.
"""

from vrf_api.adapters.rate_limit.base import (
    UNKNOWN_CLIENT_KEY,
    AbstractRateLimiter,
    RateLimitResult,
)
from vrf_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "UNKNOWN_CLIENT_KEY",
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
