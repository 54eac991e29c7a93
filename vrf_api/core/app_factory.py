"""Application factory for the FastAPI app.

Builds the app and the components it owns (rate limiter, VRF service) so
tests can construct isolated instances with their own collaborators.
"""

from __future__ import annotations

from fastapi import FastAPI

from vrf_api.adapters.chain.factory import create_chain_client
from vrf_api.adapters.rate_limit.base import AbstractRateLimiter
from vrf_api.api.routes import health_router, vrf_router
from vrf_api.core.config import RateLimitSettings, settings
from vrf_api.core.exception_handlers import setup_exception_handlers
from vrf_api.core.logging import configure_logging
from vrf_api.core.middleware import cors_headers_middleware, request_id_middleware
from vrf_api.core.openapi import apply_openapi_customizations
from vrf_api.core.rate_limit import build_rate_limiter
from vrf_api.services.vrf_service import VRFService


def create_app(
    *,
    vrf_service: VRFService | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    rate_limit_settings: RateLimitSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        vrf_service: Service to use instead of one built from settings.
        rate_limiter: Limiter to use instead of one built from settings.
        rate_limit_settings: Rate limit policy (on/off, client header,
            429 headers); defaults to the global settings.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging()

    app = FastAPI(
        title="Harmony VRF API",
        description=(
            "Returns a verifiable random integer in [min, max] derived from the "
            "Harmony chain's native VRF output for the current block, mixed with "
            "the request timestamp. Every response carries a proof that can be "
            "checked against the block explorer."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    # An empty limiter has len() == 0, so compare against None explicitly
    rate_limit_cfg = rate_limit_settings if rate_limit_settings is not None else settings.rate_limit
    app.state.rate_limit_settings = rate_limit_cfg
    app.state.rate_limiter = (
        rate_limiter if rate_limiter is not None else build_rate_limiter(rate_limit_cfg)
    )
    app.state.vrf_service = (
        vrf_service if vrf_service is not None else VRFService(chain=create_chain_client())
    )

    # Middleware (last added runs first)
    app.middleware("http")(cors_headers_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(vrf_router)

    apply_openapi_customizations(app)

    return app
