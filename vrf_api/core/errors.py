"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability.

    Details are logged, never rendered to clients.
    """

    code: str
    field: str
    limit: int
    retry_after: int
    rpc_method: str
    rpc_error_code: int
    http_status: int
    block_number: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error string, rendered as ``error``.
        detail: Optional secondary description, rendered as ``message``.
        details: Optional structured details for logging.
        headers: Optional response headers (e.g. Retry-After).
    """

    code: str
    message: str
    detail: str | None = None
    details: ErrorDetails | None = None
    headers: dict[str, str] | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input fails validation."""


class MethodNotAllowedAppError(AppError):
    """Raised when the endpoint is called with an unsupported verb."""


class RateLimitAppError(AppError):
    """Raised when a client exhausted its request budget."""


class UpstreamAppError(AppError):
    """Raised when the chain node cannot be reached or its data cannot be used."""
