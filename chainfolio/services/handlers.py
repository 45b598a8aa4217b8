"""Chain handler protocol and construction by chain kind."""

from typing import Optional, Protocol

from chainfolio.clients.base_client import ClientFactory
from chainfolio.config import ApiKeys, ChainDescriptor, FetchConfig, RelayConfig
from chainfolio.models.asset import Outcome
from chainfolio.services.bitcoin_handler import BitcoinChainHandler
from chainfolio.services.evm_handler import EvmChainHandler
from chainfolio.utils.errors import ConfigurationError
from chainfolio.utils.validation import KIND_BITCOIN, KIND_EVM


class ChainHandler(Protocol):
    chain: ChainDescriptor

    async def get_all_assets(self, address: str) -> Outcome:
        ...


def create_handler(
    chain: ChainDescriptor,
    api_keys: Optional[ApiKeys] = None,
    fetch_config: Optional[FetchConfig] = None,
    relay_config: Optional[RelayConfig] = None,
    client_factory: Optional[ClientFactory] = None,
    logger=None
) -> ChainHandler:
    """Build the handler matching ``chain.kind``."""
    if chain.kind == KIND_EVM:
        return EvmChainHandler(
            chain,
            api_keys=api_keys,
            fetch_config=fetch_config,
            client_factory=client_factory,
            logger=logger,
        )
    if chain.kind == KIND_BITCOIN:
        return BitcoinChainHandler(
            chain,
            relay_config=relay_config,
            client_factory=client_factory,
            logger=logger,
        )
    raise ConfigurationError(f"No handler for chain kind {chain.kind!r}", details={"chain": chain.key})
