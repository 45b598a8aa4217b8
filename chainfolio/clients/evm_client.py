"""EVM JSON-RPC client.

Read-only calls used for balance discovery on Ethereum-compatible chains.
"""

from chainfolio.clients.base_client import JsonRpcClient
from chainfolio.utils.errors import UpstreamParseError
from chainfolio.utils.units import parse_hex_quantity

# keccak("balanceOf(address)")[:4]
BALANCE_OF_SELECTOR = "0x70a08231"


def encode_balance_of(owner: str) -> str:
    """ABI-encode an ERC-20 ``balanceOf(owner)`` call."""
    return BALANCE_OF_SELECTOR + owner.lower()[2:].rjust(64, "0")


class EvmRpcClient(JsonRpcClient):
    """JSON-RPC client for EVM nodes."""

    upstream = "evm-rpc"

    def _quantity(self, method: str, value) -> int:
        try:
            return parse_hex_quantity(value)
        except ValueError as e:
            raise UpstreamParseError(f"{method} returned {value!r}: {e}", upstream=self.upstream) from e

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """Native balance of ``address`` in base units (wei)."""
        result = await self._make_request("eth_getBalance", [address, block])
        return self._quantity("eth_getBalance", result)

    async def get_token_balance(self, contract: str, owner: str, block: str = "latest") -> int:
        """ERC-20 balance of ``owner`` on ``contract`` in the token's base units."""
        call = {"to": contract, "data": encode_balance_of(owner)}
        result = await self._make_request("eth_call", [call, block])
        return self._quantity("eth_call", result)

    async def get_chain_id(self) -> int:
        result = await self._make_request("eth_chainId")
        return self._quantity("eth_chainId", result)
