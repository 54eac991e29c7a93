"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return a uniform JSON envelope:

    {"error": "<short message>", "message": "<optional detail>"}

Design:
- AppError subclasses → 400, 405, 429, 500
- Starlette HTTP errors (404, framework 405) → same envelope
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vrf_api.core.config import settings
from vrf_api.core.errors import (
    AppError,
    MethodNotAllowedAppError,
    RateLimitAppError,
    UpstreamAppError,
)
from vrf_api.core.logging import get_request_id

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"
METHOD_NOT_ALLOWED = "Method not allowed. Use POST to generate random numbers."


def error_body(error: str, message: str | None = None) -> dict[str, str]:
    """Build the error envelope returned by every failing request."""
    body = {"error": error}
    if message is not None:
        body["message"] = message
    return body


def status_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, MethodNotAllowedAppError):
        return 405
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, UpstreamAppError):
        return 500
    return 400


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with the uniform JSON envelope.

    Routes domain errors to HTTP status codes:
    - ValidationAppError → 400 Bad Request (client fault)
    - MethodNotAllowedAppError → 405 Method Not Allowed
    - RateLimitAppError → 429 Too Many Requests
    - UpstreamAppError → 500 Internal Server Error (chain node fault)

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error body.
    """
    status_code = status_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "error_detail": exc.detail,
            "status_code": status_code,
            "error_details": exc.details or {},
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.message, exc.detail),
        headers=exc.headers,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework-level HTTP errors (unknown path, wrong verb)."""
    if exc.status_code == 405:
        content = error_body(METHOD_NOT_ALLOWED)
    else:
        content = error_body(str(exc.detail))

    logger.info(
        "http_error_handled",
        extra={
            "status_code": exc.status_code,
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    No stack traces or exception types reach the client.

    Starlette renders this response outside the ``http`` middlewares, so the
    CORS and request id headers are set here.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error.
    """
    request_id = get_request_id() or getattr(request.state, "request_id", None)
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": request_id,
        },
    )

    headers = {"Access-Control-Allow-Origin": settings.cors.allow_origin}
    if request_id:
        headers[settings.log.request_id_header] = request_id

    return JSONResponse(
        status_code=500,
        content=error_body(
            INTERNAL_ERROR,
            "An unexpected error occurred. Please try again later.",
        ),
        headers=headers,
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from vrf_api.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
