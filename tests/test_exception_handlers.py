"""Tests for global exception handlers.

Validates that all exception types are rendered in the uniform error
envelope with the right status code and without information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vrf_api.core.errors import (
    AppError,
    MethodNotAllowedAppError,
    RateLimitAppError,
    UpstreamAppError,
    ValidationAppError,
)
from vrf_api.core.exception_handlers import (
    error_body,
    general_exception_handler,
    setup_exception_handlers,
    status_for,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def handler_client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestStatusMapping:
    @pytest.mark.parametrize(
        ("error_cls", "status"),
        [
            (ValidationAppError, 400),
            (MethodNotAllowedAppError, 405),
            (RateLimitAppError, 429),
            (UpstreamAppError, 500),
            (AppError, 400),
        ],
    )
    def test_status_for(self, error_cls, status: int) -> None:
        assert status_for(error_cls(code="c", message="m")) == status

    def test_error_body_omits_missing_message(self) -> None:
        assert error_body("boom") == {"error": "boom"}
        assert error_body("boom", "detail") == {"error": "boom", "message": "detail"}


class TestAppErrorHandler:
    def test_validation_error_returns_400(
        self, handler_client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.get("/test-validation")
        async def endpoint():
            raise ValidationAppError(code="invalid_range", message="min must be less than max")

        response = handler_client.get("/test-validation")

        assert response.status_code == 400
        assert response.json() == {"error": "min must be less than max"}

    def test_rate_limit_error_keeps_headers(
        self, handler_client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.get("/test-rate-limit")
        async def endpoint():
            raise RateLimitAppError(
                code="rate_limit_exceeded",
                message="Rate limit exceeded",
                detail="Maximum 60 requests per minute",
                headers={"Retry-After": "12"},
            )

        response = handler_client.get("/test-rate-limit")

        assert response.status_code == 429
        assert response.json() == {
            "error": "Rate limit exceeded",
            "message": "Maximum 60 requests per minute",
        }
        assert response.headers["Retry-After"] == "12"

    def test_upstream_error_returns_500_without_details(
        self, handler_client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.get("/test-upstream")
        async def endpoint():
            raise UpstreamAppError(
                code="chain_rpc_error",
                message="Internal server error",
                detail="Chain node error: header not found",
                details={"rpc_method": "eth_call", "rpc_error_code": -32000},
            )

        response = handler_client.get("/test-upstream")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "Chain node error: header not found",
        }
        assert "rpc_method" not in response.text

    def test_framework_405_uses_envelope(
        self, handler_client: TestClient, app_with_handlers: FastAPI
    ) -> None:
        @app_with_handlers.post("/only-post")
        async def endpoint():
            return {}

        response = handler_client.get("/only-post")

        assert response.status_code == 405
        assert response.json() == {
            "error": "Method not allowed. Use POST to generate random numbers."
        }


class TestGeneralExceptionHandler:
    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI) -> None:
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_logic(self) -> None:
        request = AsyncMock()
        request.url.path = "/"
        request.method = "POST"

        exc = RuntimeError("Unexpected error: node key material at /etc/secret")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"] == "Internal server error"
        assert "secret" not in data["message"]

    def test_general_exception_handler_never_leaks_stack_trace(self) -> None:
        request = AsyncMock()
        request.url.path = "/"
        request.method = "POST"

        response = asyncio.run(general_exception_handler(request, ValueError("details")))

        response_text = bytes(response.body).decode()
        assert "Traceback" not in response_text
        assert 'File "' not in response_text
        assert "ValueError" not in response_text


def test_multiple_handler_setups_does_not_fail() -> None:
    app = FastAPI()

    setup_exception_handlers(app)
    setup_exception_handlers(app)

    assert AppError in app.exception_handlers
