"""Factory for the chain client used by the VRF service."""

from vrf_api.adapters.chain.base import AbstractChainClient
from vrf_api.adapters.chain.harmony_rpc import HarmonyRPCClient
from vrf_api.core.config import ChainSettings, settings
from vrf_api.core.errors import ValidationAppError


def create_chain_client(cfg: ChainSettings | None = None) -> AbstractChainClient:
    """Instantiate the chain client from settings.

    Args:
        cfg: Chain settings; defaults to the global settings.

    Returns:
        AbstractChainClient: Configured client instance.

    Raises:
        ValidationAppError: If the RPC endpoint is not an http(s) URL.
    """
    cfg = cfg or settings.chain
    rpc_url = cfg.rpc.strip()

    if not rpc_url.startswith(("http://", "https://")):
        raise ValidationAppError(
            code="chain_invalid_rpc_url",
            message="HARMONY_RPC must be an http(s) URL",
        )

    return HarmonyRPCClient(rpc_url=rpc_url, timeout_seconds=cfg.timeout_seconds)
