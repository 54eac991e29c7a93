"""HTTP middleware for request correlation and CORS response headers.

Usage:
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(cors_headers_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from vrf_api.core.config import settings
from vrf_api.core.logging import clear_request_id, set_request_id


async def request_id_middleware(request: Request, call_next) -> Response:
    """HTTP middleware for request ID generation and propagation.

    If the client provides an X-Request-ID header (configurable via
    LOG_REQUEST_ID_HEADER), that value is used. Otherwise, a new UUID is
    generated. The ID is stored in contextvars for log correlation and echoed
    back in the response headers together with the handling duration.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with X-Request-ID and
            X-Request-Duration-ms headers added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    # Kept on the scope for handlers that run after this middleware unwinds
    request.state.request_id = request_id
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def cors_headers_middleware(request: Request, call_next) -> Response:
    """Attach Access-Control-Allow-Origin to every response, errors included."""

    response: Response = await call_next(request)
    response.headers.setdefault("Access-Control-Allow-Origin", settings.cors.allow_origin)
    return response
