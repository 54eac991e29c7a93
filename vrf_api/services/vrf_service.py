"""VRF random number service.

Turns the Harmony chain's per-block VRF output into a number inside a
caller-supplied range:

- Read the current block height and the VRF bytes of the current block
  from the precompiled contract at 0xff
- Mix the VRF bytes with a millisecond timestamp so requests landing in the
  same block get different numbers
- Reduce the mixed seed modulo the range size (modulo bias is accepted)
- Build the proof bundle that lets anyone recompute the number

The helpers ``compute_unique_seed``, ``reduce_to_range`` and
``compute_request_id`` are pure and can be used to verify a response.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_utils import big_endian_to_int, encode_hex, keccak

from vrf_api.adapters.chain.base import AbstractChainClient
from vrf_api.core.config import ChainSettings, settings
from vrf_api.core.errors import UpstreamAppError
from vrf_api.core.validation import Range
from vrf_api.schemas.vrf import RandomNumberResponse, VRFProof

logger = logging.getLogger(__name__)

VRF_METHOD = "harmony-native-vrf"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def compute_unique_seed(vrf_data: bytes, timestamp_ms: int) -> bytes:
    """Hash the VRF output together with the request timestamp.

    Args:
        vrf_data: 32 VRF bytes of the block.
        timestamp_ms: Request timestamp in epoch milliseconds.

    Returns:
        bytes: keccak256 of ``abi.encode(bytes32, uint256)``.
    """
    return keccak(encode(["bytes32", "uint256"], [vrf_data, timestamp_ms]))


def reduce_to_range(seed: bytes, range_: Range) -> int:
    """Map a 256-bit seed onto ``[range_.min, range_.max]``."""
    return big_endian_to_int(seed) % range_.size + range_.min


def compute_request_id(block_number: int, range_: Range, timestamp_ms: int) -> bytes:
    """Hash the request coordinates into a practically unique identifier."""
    return keccak(
        encode(
            ["uint256", "uint256", "uint256", "uint256"],
            [block_number, range_.min, range_.max, timestamp_ms],
        )
    )


@dataclass(frozen=True)
class VRFResult:
    """A derived number together with its proof."""

    random_number: int
    proof: VRFProof
    request_id: str
    range: Range
    timestamp: int

    def to_response(self) -> RandomNumberResponse:
        return RandomNumberResponse(
            random_number=self.random_number,
            proof=self.proof.model_dump_json(by_alias=True),
            request_id=self.request_id,
            min=self.range.min,
            max=self.range.max,
            timestamp=self.timestamp,
        )


class VRFService:
    """Derives verifiable random numbers from the chain's native VRF.

    Attributes:
        chain: Client for the Harmony node.
        chain_settings: VRF address, chain tag and explorer URL template.
    """

    def __init__(
        self,
        chain: AbstractChainClient,
        chain_settings: ChainSettings | None = None,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the service with its dependencies.

        Args:
            chain: Configured chain client.
            chain_settings: Chain settings; defaults to the global settings.
            clock_ms: Time source returning epoch milliseconds.
        """
        self.chain = chain
        self.chain_settings = chain_settings or settings.chain
        self._clock_ms = clock_ms

    async def _read_vrf(self) -> tuple[int, bytes]:
        """Fetch the current block height and its VRF bytes.

        Raises:
            UpstreamAppError: If the node is unreachable or answers with an error.
        """
        block_number = await self.chain.get_block_number()
        # The precompile takes no input and answers for the block being executed
        vrf_data = await self.chain.call(self.chain_settings.vrf_address, b"")
        return block_number, vrf_data

    def _build_proof(
        self,
        block_number: int,
        vrf_data: bytes,
        unique_seed: bytes,
        timestamp_ms: int,
    ) -> VRFProof:
        return VRFProof(
            method=VRF_METHOD,
            block_number=block_number,
            vrf_data=encode_hex(vrf_data),
            vrf_randomness=str(big_endian_to_int(vrf_data)),
            unique_seed=encode_hex(unique_seed),
            timestamp=timestamp_ms,
            chain=self.chain_settings.chain_name,
            verifiable=True,
            verify_url=self.chain_settings.explorer_block_url.format(
                block_number=block_number
            ),
        )

    def derive(
        self,
        range_: Range,
        block_number: int,
        vrf_data: bytes,
        timestamp_ms: int,
    ) -> VRFResult:
        """Derive the number and proof from already fetched chain data.

        Raises:
            UpstreamAppError: If the VRF bytes or numbers cannot be ABI-encoded
                (e.g. the node returned more than 32 bytes).
        """
        try:
            unique_seed = compute_unique_seed(vrf_data, timestamp_ms)
            request_id = compute_request_id(block_number, range_, timestamp_ms)
        except EncodingError as exc:
            raise UpstreamAppError(
                code="vrf_derivation_failed",
                message="Internal server error",
                detail=f"Could not derive randomness from VRF output: {type(exc).__name__}",
                details={"block_number": block_number},
            ) from exc

        return VRFResult(
            random_number=reduce_to_range(unique_seed, range_),
            proof=self._build_proof(block_number, vrf_data, unique_seed, timestamp_ms),
            request_id=encode_hex(request_id),
            range=range_,
            timestamp=timestamp_ms,
        )

    async def generate(self, range_: Range) -> VRFResult:
        """Produce a verifiable random number in ``range_``.

        Single attempt: a failed node round-trip is reported, not retried.

        Args:
            range_: Validated inclusive range.

        Returns:
            VRFResult with the number, proof and request id.

        Raises:
            UpstreamAppError: On chain connectivity or derivation failures.
        """
        block_number, vrf_data = await self._read_vrf()
        timestamp_ms = self._clock_ms()

        result = self.derive(range_, block_number, vrf_data, timestamp_ms)

        logger.info(
            "vrf.generated",
            extra={
                "block_number": block_number,
                "range_min": range_.min,
                "range_max": range_.max,
                "vrf_bytes": len(vrf_data),
                "vrf_request_id": result.request_id,
            },
        )
        return result
