"""Pydantic schemas for random number requests, proofs and responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class RandomNumberRequest(BaseModel):
    """Documented shape of the request body.

    The handler validates the raw JSON itself so that type errors map to the
    service's own error messages; this model feeds the OpenAPI schema only.
    """

    min: int = Field(..., ge=0, description="Inclusive lower bound.")
    max: int = Field(..., ge=0, description="Inclusive upper bound, greater than min.")


class VRFProof(_CamelModel):
    """Everything needed to recompute a number from chain data."""

    method: str = Field(
        "harmony-native-vrf", description="Derivation method tag."
    )
    block_number: int = Field(..., description="Block whose VRF output was used.")
    vrf_data: str = Field(..., description="Raw VRF bytes as 0x-prefixed hex.")
    vrf_randomness: str = Field(
        ..., description="VRF bytes read as an unsigned big-endian integer (decimal)."
    )
    unique_seed: str = Field(
        ...,
        description="keccak256(abi.encode(bytes32 vrfData, uint256 timestamp)) as hex.",
    )
    timestamp: int = Field(..., description="Request timestamp in epoch milliseconds.")
    chain: str = Field("harmony-one", description="Chain the VRF was read from.")
    verifiable: bool = Field(True, description="Always true; verify via the explorer.")
    verify_url: str = Field(..., description="Block explorer page for blockNumber.")
    description: str = Field(
        "Uses Harmony's native VRF from precompiled contract at 0xff "
        "(current block VRF) mixed with timestamp for uniqueness",
        description="Human-readable summary of the derivation.",
    )


class RandomNumberResponse(_CamelModel):
    """Successful response body."""

    random_number: int = Field(..., description="Random integer in [min, max].")
    proof: str = Field(..., description="VRFProof serialized as a JSON string.")
    request_id: str = Field(
        ...,
        description="keccak256(abi.encode(blockNumber, min, max, timestamp)) as hex.",
    )
    min: int
    max: int
    timestamp: int = Field(..., description="Request timestamp in epoch milliseconds.")


class ErrorResponse(BaseModel):
    """Error envelope shared by every failing request."""

    error: str
    message: str | None = None
