"""Rate limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the in-memory store can later be replaced by a shared one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

# Shared bucket for requests whose source address cannot be determined
UNKNOWN_CLIENT_KEY = "unknown"


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the client's window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for per-client rate limiters."""

    @abstractmethod
    def consume(self, key: str) -> RateLimitResult:
        """Count one request against ``key`` and decide whether it may proceed.

        Args:
            key: Client identifier (source address or UNKNOWN_CLIENT_KEY).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError
