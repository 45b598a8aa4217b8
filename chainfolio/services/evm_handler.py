"""
EVM chain handler.

Discovers native balances, configured fungible-token balances and (where the
chain and provider keys allow it) NFTs for a single address on any
Ethereum-compatible chain described by a ChainDescriptor.
"""

import asyncio
from typing import Any, Dict, List, Optional

from chainfolio.clients.alchemy_client import AlchemyNftClient
from chainfolio.clients.base_client import ClientFactory
from chainfolio.clients.evm_client import EvmRpcClient
from chainfolio.config import (
    FEATURE_NFTS,
    FEATURE_TOKENS,
    ApiKeys,
    ChainDescriptor,
    FetchConfig,
    TokenSpec,
    get_api_keys,
    get_fetch_config,
)
from chainfolio.models.asset import Asset, AssetType, Outcome, asset_id
from chainfolio.services.base_service import BaseService
from chainfolio.utils.errors import (
    AddressValidationError,
    CapabilityUnavailableError,
    ChainfolioError,
    ConfigurationError,
    UpstreamTransportError,
)
from chainfolio.utils.units import format_units
from chainfolio.utils.validation import KIND_EVM, is_valid_address


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class EvmChainHandler(BaseService):
    """Asset discovery for one EVM chain."""

    def __init__(
        self,
        chain: ChainDescriptor,
        api_keys: Optional[ApiKeys] = None,
        fetch_config: Optional[FetchConfig] = None,
        client_factory: Optional[ClientFactory] = None,
        logger=None
    ):
        """
        Initialize the handler.

        Args:
            chain: Descriptor of the chain to query
            api_keys: Provider keys; defaults to environment-based keys
            fetch_config: Outbound request settings
            client_factory: Callable returning a fresh ``httpx.AsyncClient``
            logger: Optional structlog logger
        """
        if chain.kind != KIND_EVM or not chain.rpc_url:
            raise ConfigurationError(
                f"{chain.key} is not an EVM chain with an RPC endpoint",
                details={"chain": chain.key}
            )
        super().__init__(client_factory=client_factory, logger=logger)
        self.chain = chain
        self.api_keys = api_keys or get_api_keys()
        self.fetch_config = fetch_config or get_fetch_config()
        self.logger = self.logger.bind(chain=chain.key)

    def _validate(self, address: str) -> None:
        if not is_valid_address(address, self.chain.key, registry={self.chain.key: self.chain}):
            raise AddressValidationError(address, self.chain.key)

    def _rpc(self, http) -> EvmRpcClient:
        return EvmRpcClient(
            http,
            self.chain.rpc_url,
            max_retries=self.fetch_config.rpc_max_retries,
            retry_delay=self.fetch_config.rpc_retry_delay,
            upstream=f"{self.chain.key}-rpc",
            logger=self.logger,
        )

    async def get_native_balance(self, address: str) -> Outcome:
        """
        Get the native coin balance of an address.

        Args:
            address: Wallet address

        Returns:
            Outcome carrying a single native Asset
        """
        return await self.capture("native_balance", self._fetch_native_balance(address), address=address)

    async def _fetch_native_balance(self, address: str) -> Asset:
        self._validate(address)
        async with self.client_factory() as http:
            wei = await self._rpc(http).get_balance(address)

        self.logger.debug("native_balance_fetched", address=address, balance=str(wei))
        return Asset(
            id=asset_id(self.chain.id_prefix, address, "native"),
            type=AssetType.NATIVE,
            chain=self.chain.key,
            wallet_address=address,
            name=self.chain.name,
            symbol=self.chain.symbol,
            decimals=self.chain.decimals,
            balance=str(wei),
            balance_formatted=format_units(wei, self.chain.decimals),
        )

    async def get_token_balances(self, address: str) -> Outcome:
        """
        Get balances of the chain's configured tokens.

        Each token is queried independently; a failing contract is logged and
        skipped. Only strictly positive balances are returned, in configured
        order.

        Args:
            address: Wallet address

        Returns:
            Outcome carrying a list of token Assets
        """
        return await self.capture("token_balances", self._fetch_token_balances(address), address=address)

    async def _fetch_token_balances(self, address: str) -> List[Asset]:
        self._validate(address)
        if not self.chain.has_feature(FEATURE_TOKENS) or not self.chain.tokens:
            return []

        async with self.log_timing("token_scan", address=address, tokens=len(self.chain.tokens)):
            async with self.client_factory() as http:
                rpc = self._rpc(http)
                results = await self.gather_with_concurrency(
                    self.fetch_config.token_scan_concurrency,
                    *[self._token_balance(rpc, token, address) for token in self.chain.tokens]
                )

        failed = sum(1 for result in results if isinstance(result, Exception))
        if failed == len(results):
            raise UpstreamTransportError(
                f"all {failed} token balance queries failed",
                upstream=f"{self.chain.key}-rpc"
            )
        return [result for result in results if isinstance(result, Asset)]

    async def _token_balance(self, rpc: EvmRpcClient, token: TokenSpec, address: str):
        """Asset for one token, None for a zero balance, or the exception raised."""
        try:
            raw = await rpc.get_token_balance(token.address, address)
        except ChainfolioError as e:
            self.logger.warning(
                "token_balance_failed",
                address=address,
                symbol=token.symbol,
                contract=token.address,
                error=e.message
            )
            return e
        except Exception as e:
            self.logger.exception(
                "token_balance_crashed",
                address=address,
                symbol=token.symbol,
                contract=token.address,
                error=str(e)
            )
            return e

        if raw <= 0:
            return None
        return Asset(
            id=asset_id(self.chain.id_prefix, address, token.address),
            type=AssetType.TOKEN,
            chain=self.chain.key,
            wallet_address=address,
            name=token.name,
            symbol=token.symbol,
            decimals=token.decimals,
            balance=str(raw),
            balance_formatted=format_units(raw, token.decimals),
            contract_address=token.address,
            token_standard=self.chain.token_standard,
        )

    def _require_nft_capability(self) -> None:
        if not self.chain.has_feature(FEATURE_NFTS) or not self.chain.nft_api_url:
            raise CapabilityUnavailableError("nfts", f"{self.chain.key} has no NFT provider")
        if not self.api_keys.has_alchemy:
            raise CapabilityUnavailableError("nfts", "ALCHEMY_API_KEY is not configured")

    async def get_nfts(self, address: str) -> Outcome:
        """
        Get NFTs owned by an address.

        Chains without an NFT provider, or deployments without a provider key,
        yield an empty successful result.

        Args:
            address: Wallet address

        Returns:
            Outcome carrying a list of NFT Assets
        """
        return await self.capture("nfts", self._fetch_nfts(address), address=address)

    async def _fetch_nfts(self, address: str) -> List[Asset]:
        self._validate(address)
        try:
            self._require_nft_capability()
        except CapabilityUnavailableError as e:
            self.logger.debug("nfts_skipped", address=address, reason=e.details["reason"])
            return []

        async with self.client_factory() as http:
            client = AlchemyNftClient(
                http,
                self.chain.nft_api_url,
                self.api_keys.alchemy,
                logger=self.logger
            )
            owned = await client.get_owned_nfts(address)

        assets = []
        for nft in owned:
            try:
                assets.append(self._nft_asset(address, nft))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning("nft_entry_skipped", address=address, error=str(e))
        return assets

    def _nft_asset(self, address: str, nft: Dict[str, Any]) -> Asset:
        contract = nft.get("contract") or {}
        contract_metadata = nft.get("contractMetadata") or {}
        metadata = nft.get("metadata") or {}
        media = nft.get("media") or []

        contract_address = contract["address"]
        token_id = nft["id"]["tokenId"]

        image_url = metadata.get("image")
        if not image_url and media:
            image_url = media[0].get("gateway")

        floor_price = _as_float((contract_metadata.get("openSea") or {}).get("floorPrice"))

        return Asset(
            id=asset_id(self.chain.id_prefix, address, contract_address, token_id),
            type=AssetType.NFT,
            chain=self.chain.key,
            wallet_address=address,
            name=nft.get("title") or metadata.get("name") or "Unknown NFT",
            symbol=contract.get("symbol") or contract_metadata.get("symbol") or "NFT",
            decimals=0,
            balance=str(nft.get("balance") or 1),
            balance_formatted=str(nft.get("balance") or 1),
            contract_address=contract_address,
            token_standard=contract.get("tokenType") or contract_metadata.get("tokenType"),
            token_id=str(token_id),
            image_url=image_url or None,
            collection_name=contract.get("name") or contract_metadata.get("name"),
            floor_price=floor_price,
        )

    async def get_all_assets(self, address: str) -> Outcome:
        """
        Get every asset held by an address on this chain.

        The native, token and NFT fetches run concurrently. A failed sub-fetch
        is recorded as a warning and the remaining results are still returned.

        Args:
            address: Wallet address

        Returns:
            Outcome carrying native, token and NFT Assets in that order
        """
        try:
            self._validate(address)
        except AddressValidationError as e:
            self.logger.info("invalid_address", address=address)
            return Outcome.fail(e)

        native, tokens, nfts = await asyncio.gather(
            self.get_native_balance(address),
            self.get_token_balances(address),
            self.get_nfts(address),
        )
        return self.merge_outcomes(
            [("native balance", native), ("token balances", tokens), ("nfts", nfts)],
            address=address
        )
