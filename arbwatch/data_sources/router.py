"""Uniswap-V2-style router client.

Only the read-only ``getAmountsOut`` view is bound; nothing here signs or
sends transactions.
"""

import logging

from web3 import AsyncWeb3
from web3.contract import AsyncContract

from arbwatch.data_sources.base import BaseQuoteSource

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Contract ABI (minimal - only the quote view)
# ═══════════════════════════════════════════════════════════════════════════════

ROUTER_ABI = [
    {
        "name": "getAmountsOut",
        "type": "function",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "path", "type": "address[]"},
        ],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
        "stateMutability": "view",
    },
]


async def connect_rpc(rpc_url: str, request_timeout: float = 10.0) -> AsyncWeb3:
    """Open an async web3 connection and verify it is reachable.

    Raises:
        ConnectionError: If the endpoint does not answer
    """
    w3 = AsyncWeb3(
        AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout})
    )
    if not await w3.is_connected():
        await w3.provider.disconnect()
        raise ConnectionError(f"Failed to connect to RPC: {_redact(rpc_url)}")

    chain_id = await w3.eth.chain_id
    logger.info(f"Connected to RPC (chain id {chain_id})")
    return w3


async def close_rpc(w3: AsyncWeb3) -> None:
    """Close the provider's HTTP session."""
    await w3.provider.disconnect()


def _redact(rpc_url: str) -> str:
    # RPC URLs routinely embed API keys in the path
    scheme, _, rest = rpc_url.partition("://")
    host = rest.split("/", 1)[0]
    return f"{scheme}://{host}/..." if rest else rpc_url


class RouterClient(BaseQuoteSource):
    """Quotes swaps against one router contract."""

    def __init__(self, w3: AsyncWeb3, address: str, name: str) -> None:
        """Initialize the client.

        Args:
            w3: Shared async web3 connection
            address: Router contract address
            name: Human-readable venue label
        """
        self.name = name
        super().__init__()
        self.w3 = w3
        self.address = AsyncWeb3.to_checksum_address(address)
        self._contract: AsyncContract | None = None

    async def connect(self) -> None:
        """Bind the router contract."""
        if self._contract is None:
            self._contract = self.w3.eth.contract(address=self.address, abi=ROUTER_ABI)
        self._connected = True
        self.logger.debug(f"Router bound at {self.address}")

    async def disconnect(self) -> None:
        """Drop the contract binding. The shared connection is closed by its owner."""
        self._contract = None
        self._connected = False

    async def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        """Call ``getAmountsOut(amountIn, path)`` on the router."""
        if self._contract is None:
            raise RuntimeError("Client not connected. Call connect() first.")

        amounts = await self._contract.functions.getAmountsOut(amount_in, path).call()
        return list(amounts)
