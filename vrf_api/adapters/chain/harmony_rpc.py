"""Harmony JSON-RPC client adapter."""

from __future__ import annotations

import itertools
import logging
from typing import Any

import httpx
from eth_utils import decode_hex, encode_hex, is_hex, to_int

from vrf_api.adapters.chain.base import AbstractChainClient
from vrf_api.core.errors import UpstreamAppError

logger = logging.getLogger(__name__)


class HarmonyRPCClient(AbstractChainClient):
    """Client for a Harmony node speaking Ethereum-compatible JSON-RPC 2.0.

    Every call is a single attempt over a short-lived ``httpx.AsyncClient``;
    failures surface as ``UpstreamAppError`` and are never retried here.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the RPC client.

        Args:
            rpc_url: JSON-RPC endpoint of the node.
            timeout_seconds: Timeout for each request in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.rpc_url = rpc_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._ids = itertools.count(1)

    async def get_block_number(self) -> int:
        result = await self._request("eth_blockNumber", [])
        if not isinstance(result, str) or not is_hex(result):
            raise self._bad_result("eth_blockNumber", result)
        try:
            return to_int(hexstr=result)
        except ValueError as exc:
            raise self._bad_result("eth_blockNumber", result) from exc

    async def call(self, to: str, data: bytes = b"") -> bytes:
        params = [{"to": to, "data": encode_hex(data)}, "latest"]
        result = await self._request("eth_call", params)
        if not isinstance(result, str) or not is_hex(result):
            raise self._bad_result("eth_call", result)
        try:
            return decode_hex(result)
        except ValueError as exc:
            # is_hex accepts odd-length strings that do not decode to bytes
            raise self._bad_result("eth_call", result) from exc

    async def _request(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result`` member.

        Raises:
            UpstreamAppError: On transport errors, HTTP error status, a
                malformed body or a JSON-RPC error object.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "chain.rpc_failed",
                extra={"rpc_method": method, "http_status": exc.response.status_code},
            )
            raise UpstreamAppError(
                code="chain_http_error",
                message="Internal server error",
                detail=f"Chain node returned HTTP {exc.response.status_code}",
                details={"rpc_method": method, "http_status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "chain.rpc_failed",
                extra={"rpc_method": method, "error_type": type(exc).__name__},
            )
            raise UpstreamAppError(
                code="chain_unreachable",
                message="Internal server error",
                detail=f"Could not reach chain node: {type(exc).__name__}",
                details={"rpc_method": method},
            ) from exc
        except ValueError as exc:
            # response.json() raises a ValueError subclass on non-JSON bodies
            raise UpstreamAppError(
                code="chain_invalid_response",
                message="Internal server error",
                detail="Chain node returned a non-JSON response",
                details={"rpc_method": method},
            ) from exc

        if not isinstance(body, dict):
            raise self._bad_result(method, body)

        error = body.get("error")
        if error is not None:
            error_message = error.get("message") if isinstance(error, dict) else str(error)
            error_code = error.get("code") if isinstance(error, dict) else None
            logger.error(
                "chain.rpc_failed",
                extra={"rpc_method": method, "rpc_error_code": error_code},
            )
            raise UpstreamAppError(
                code="chain_rpc_error",
                message="Internal server error",
                detail=f"Chain node error: {error_message}",
                details={"rpc_method": method, "rpc_error_code": error_code or 0},
            )

        if "result" not in body:
            raise self._bad_result(method, body)

        return body["result"]

    @staticmethod
    def _bad_result(method: str, result: Any) -> UpstreamAppError:
        logger.error(
            "chain.rpc_failed",
            extra={"rpc_method": method, "result_type": type(result).__name__},
        )
        return UpstreamAppError(
            code="chain_invalid_response",
            message="Internal server error",
            detail=f"Unexpected {method} result from chain node",
            details={"rpc_method": method},
        )
