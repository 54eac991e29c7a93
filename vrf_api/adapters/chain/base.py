from abc import ABC, abstractmethod


class AbstractChainClient(ABC):
	"""Interface for chain nodes that expose block height and contract calls."""

	@abstractmethod
	async def get_block_number(self) -> int:
		"""Return the height of the latest block known to the node.

		Raises:
			UpstreamAppError: If the node cannot be reached or answers with an error.
		"""
		...

	@abstractmethod
	async def call(self, to: str, data: bytes = b"") -> bytes:
		"""Execute a read-only call against ``to`` in the latest block.

		Args:
			to: Hex address of the contract (or precompile) to call.
			data: ABI-encoded calldata; empty for parameterless precompiles.

		Returns:
			bytes: Raw return data of the call.

		Raises:
			UpstreamAppError: If the node cannot be reached or answers with an error.
		"""
		...
