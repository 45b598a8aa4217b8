"""
Bitcoin chain handler.

Confirmed BTC balance from an Esplora-compatible API plus the Ordinals
inscriptions held by the address.
"""

import asyncio
from typing import Optional

from chainfolio.clients.base_client import ClientFactory
from chainfolio.clients.esplora_client import EsploraClient
from chainfolio.config import FEATURE_ORDINALS, ChainDescriptor, RelayConfig
from chainfolio.models.asset import Asset, AssetType, Outcome, asset_id
from chainfolio.services.base_service import BaseService
from chainfolio.services.ordinals.resolver import OrdinalResolver
from chainfolio.utils.errors import AddressValidationError, ConfigurationError
from chainfolio.utils.units import format_fixed
from chainfolio.utils.validation import KIND_BITCOIN, is_valid_address


class BitcoinChainHandler(BaseService):
    """Asset discovery for Bitcoin."""

    def __init__(
        self,
        chain: ChainDescriptor,
        resolver: Optional[OrdinalResolver] = None,
        relay_config: Optional[RelayConfig] = None,
        client_factory: Optional[ClientFactory] = None,
        logger=None
    ):
        """
        Initialize the handler.

        Args:
            chain: Bitcoin chain descriptor
            resolver: Ordinal resolver; built from the other arguments when omitted
            relay_config: Relay settings for the default resolver
            client_factory: Callable returning a fresh ``httpx.AsyncClient``
            logger: Optional structlog logger
        """
        if chain.kind != KIND_BITCOIN or not chain.api_base:
            raise ConfigurationError(
                f"{chain.key} is not a Bitcoin chain with an API base",
                details={"chain": chain.key}
            )
        super().__init__(client_factory=client_factory, logger=logger)
        self.chain = chain
        self.logger = self.logger.bind(chain=chain.key)
        self.resolver = resolver or OrdinalResolver(
            chain,
            relay_config=relay_config,
            client_factory=self.client_factory,
            logger=logger,
        )

    def _validate(self, address: str) -> None:
        if not is_valid_address(address, self.chain.key, registry={self.chain.key: self.chain}):
            raise AddressValidationError(address, self.chain.key)

    async def get_balance(self, address: str) -> Outcome:
        """
        Get the confirmed BTC balance of an address.

        Args:
            address: Bitcoin address (legacy, P2SH, SegWit or Taproot)

        Returns:
            Outcome carrying a single native Asset, formatted to 8 decimals
        """
        return await self.capture("btc_balance", self._fetch_balance(address), address=address)

    async def _fetch_balance(self, address: str) -> Asset:
        self._validate(address)
        async with self.client_factory() as http:
            stats = await EsploraClient(http, self.chain.api_base, logger=self.logger).get_confirmed_stats(address)

        self.logger.debug("btc_balance_fetched", address=address, balance=stats.balance, tx_count=stats.tx_count)
        return Asset(
            id=asset_id(self.chain.id_prefix, address, "native"),
            type=AssetType.NATIVE,
            chain=self.chain.key,
            wallet_address=address,
            name=self.chain.name,
            symbol=self.chain.symbol,
            decimals=self.chain.decimals,
            balance=str(stats.balance),
            balance_formatted=format_fixed(stats.balance, self.chain.decimals),
        )

    async def get_ordinals(self, address: str) -> Outcome:
        """Get the inscriptions held by an address."""
        try:
            self._validate(address)
        except AddressValidationError as e:
            return Outcome.fail(e)
        if not self.chain.has_feature(FEATURE_ORDINALS):
            return Outcome.ok([])
        return await self.resolver.resolve(address)

    async def get_all_assets(self, address: str) -> Outcome:
        """
        Get the BTC balance and ordinals of an address.

        Both fetches run concurrently; a failure in one is recorded as a
        warning and the other's assets are still returned.
        """
        try:
            self._validate(address)
        except AddressValidationError as e:
            self.logger.info("invalid_address", address=address)
            return Outcome.fail(e)

        balance, ordinals = await asyncio.gather(
            self.get_balance(address),
            self.get_ordinals(address),
        )
        return self.merge_outcomes([("balance", balance), ("ordinals", ordinals)], address=address)
