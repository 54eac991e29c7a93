"""Rate limiting wiring for the HTTP layer.

The limiter instance is built once in the app factory and kept on
``app.state``; route handlers receive it through ``get_rate_limiter`` and
call ``enforce_rate_limit`` after the request input has been validated.

Clients are keyed by source address. A trusted proxy header can be
configured (``RATE_LIMIT_CLIENT_IP_HEADER``); requests without any usable
address share the ``"unknown"`` bucket.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from vrf_api.adapters.rate_limit.base import UNKNOWN_CLIENT_KEY, AbstractRateLimiter
from vrf_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from vrf_api.core.config import RateLimitSettings, settings
from vrf_api.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)


def build_rate_limiter(cfg: RateLimitSettings | None = None) -> AbstractRateLimiter:
    """Create the process-wide limiter from settings."""

    if cfg is None:
        cfg = settings.rate_limit
    return InMemoryFixedWindowRateLimiter(
        limit=cfg.per_minute,
        window_seconds=cfg.window_seconds,
        max_keys=cfg.max_clients,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """FastAPI dependency returning the limiter owned by the application."""

    return request.app.state.rate_limiter


def get_rate_limit_settings(request: Request) -> RateLimitSettings:
    """FastAPI dependency returning the rate limit policy of the application."""

    return request.app.state.rate_limit_settings


def client_key(request: Request, cfg: RateLimitSettings | None = None) -> str:
    """Derive the limiter key for the current request.

    Args:
        request: FastAPI request.
        cfg: Rate limit policy; defaults to the global settings.

    Returns:
        str: Client address, or UNKNOWN_CLIENT_KEY when none is available.
    """

    if cfg is None:
        cfg = settings.rate_limit
    header_name = cfg.client_ip_header
    if header_name:
        forwarded = request.headers.get(header_name)
        if forwarded and forwarded.strip():
            return forwarded.split(",")[0].strip()

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT_KEY


def _hash_limiter_key(key: str) -> str:
    """Hash the client key for logging without exposing addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def enforce_rate_limit(
    request: Request,
    limiter: AbstractRateLimiter,
    cfg: RateLimitSettings | None = None,
) -> None:
    """Consume one request from the caller's budget.

    Args:
        request: FastAPI request.
        limiter: Limiter owned by the application.
        cfg: Rate limit policy; defaults to the global settings.

    Raises:
        RateLimitAppError: When the caller exceeded the configured rate.
    """

    if cfg is None:
        cfg = settings.rate_limit
    if not cfg.enabled:
        return

    key = client_key(request, cfg)
    result = limiter.consume(key)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": _hash_limiter_key(key),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "shared_bucket": key == UNKNOWN_CLIENT_KEY,
            "limit": result.limit,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] | None = None
    if cfg.include_headers:
        headers = {
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(result.reset_at),
        }

    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message="Rate limit exceeded",
        detail=f"Maximum {result.limit} requests per minute",
        details={"limit": result.limit, "retry_after": retry_after},
        headers=headers,
    )
