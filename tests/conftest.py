"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any imports that might load settings.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("HARMONY_RPC", "https://rpc.harmony.test")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "60")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from vrf_api.adapters.chain.base import AbstractChainClient  # noqa: E402
from vrf_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter  # noqa: E402
from vrf_api.core.app_factory import create_app  # noqa: E402
from vrf_api.services.vrf_service import VRFService  # noqa: E402

FIXED_TIMESTAMP_MS = 1_700_000_000_000
FIXED_BLOCK = 54_321_987
FIXED_VRF = bytes.fromhex("11" * 32)


class FakeChainClient(AbstractChainClient):
    """In-memory chain node returning fixed block data."""

    def __init__(
        self,
        block_number: int = FIXED_BLOCK,
        vrf_data: bytes = FIXED_VRF,
        error: Exception | None = None,
    ) -> None:
        self.block_number = block_number
        self.vrf_data = vrf_data
        self.error = error
        self.calls: list[tuple[str, bytes]] = []
        self.block_number_requests = 0

    async def get_block_number(self) -> int:
        self.block_number_requests += 1
        if self.error is not None:
            raise self.error
        return self.block_number

    async def call(self, to: str, data: bytes = b"") -> bytes:
        self.calls.append((to, data))
        if self.error is not None:
            raise self.error
        return self.vrf_data


@pytest.fixture
def fake_chain() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture
def clock_ms() -> Mock:
    return Mock(return_value=FIXED_TIMESTAMP_MS)


@pytest.fixture
def vrf_service(fake_chain: FakeChainClient, clock_ms: Mock) -> VRFService:
    return VRFService(chain=fake_chain, clock_ms=clock_ms)


@pytest.fixture
def rate_limiter() -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(limit=3, window_seconds=60)


@pytest.fixture
def app(vrf_service: VRFService, rate_limiter: InMemoryFixedWindowRateLimiter) -> FastAPI:
    return create_app(vrf_service=vrf_service, rate_limiter=rate_limiter)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)
