"""Chain adapter layer - JSON-RPC access to the Harmony node."""

from vrf_api.adapters.chain.base import AbstractChainClient
from vrf_api.adapters.chain.factory import create_chain_client
from vrf_api.adapters.chain.harmony_rpc import HarmonyRPCClient

__all__ = [
    "AbstractChainClient",
    "HarmonyRPCClient",
    "create_chain_client",
]
