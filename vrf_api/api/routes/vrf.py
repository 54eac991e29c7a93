import json
import logging

from fastapi import APIRouter, Depends, Request, Response

from vrf_api.adapters.rate_limit.base import AbstractRateLimiter
from vrf_api.core.errors import MethodNotAllowedAppError
from vrf_api.core.exception_handlers import METHOD_NOT_ALLOWED
from vrf_api.core.config import RateLimitSettings
from vrf_api.core.rate_limit import (
    enforce_rate_limit,
    get_rate_limit_settings,
    get_rate_limiter,
)
from vrf_api.core.validation import validate_payload
from vrf_api.schemas.vrf import ErrorResponse, RandomNumberRequest, RandomNumberResponse
from vrf_api.services.vrf_service import VRFService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["VRF"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid min/max."},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded."},
    500: {"model": ErrorResponse, "description": "Chain node unavailable."},
}


def get_vrf_service(request: Request) -> VRFService:
    """FastAPI dependency returning the VRF service owned by the application."""
    return request.app.state.vrf_service


async def _read_json(request: Request) -> object:
    """Decode the body, mapping unreadable JSON to an empty payload."""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (UnicodeDecodeError, ValueError):
        logger.info("vrf.body_not_json", extra={"body_bytes": len(body)})
        return None


@router.post(
    "/",
    response_model=RandomNumberResponse,
    response_model_by_alias=True,
    responses=_ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": RandomNumberRequest.model_json_schema(),
                }
            },
        }
    },
)
async def generate_random_number(
    request: Request,
    limiter: AbstractRateLimiter = Depends(get_rate_limiter),
    rate_limit_cfg: RateLimitSettings = Depends(get_rate_limit_settings),
    service: VRFService = Depends(get_vrf_service),
) -> RandomNumberResponse:
    """Generate a verifiable random number in ``[min, max]``.

    Flow: validate input, consume rate limit budget, derive from the current
    block's VRF, respond. Any failure short-circuits to an error envelope.

    Returns:
        RandomNumberResponse: Number, JSON-encoded proof and request id.

    Raises:
        ValidationAppError: 400 for invalid min/max.
        RateLimitAppError: 429 when the client exhausted its budget.
        UpstreamAppError: 500 when the chain node fails.
    """
    # Step 1: Validate input
    range_ = validate_payload(await _read_json(request))

    # Step 2: Rate limit
    enforce_rate_limit(request, limiter, rate_limit_cfg)

    # Step 3: Derive from the chain VRF
    result = await service.generate(range_)

    return result.to_response()


@router.options("/", include_in_schema=False)
async def preflight() -> Response:
    """Answer CORS preflight requests with an empty body."""
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        },
    )


@router.api_route("/", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def method_not_allowed() -> None:
    """Reject every verb except POST and OPTIONS."""
    raise MethodNotAllowedAppError(code="method_not_allowed", message=METHOD_NOT_ALLOWED)
