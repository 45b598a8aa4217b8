"""
Portfolio aggregation.

Fans out one ``get_all_assets`` call per enabled (wallet, chain) pair and
merges the results into a single PortfolioView. A failing chain contributes
no assets and an error note; the other chains are unaffected.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from chainfolio.config import ChainDescriptor, get_chain_registry
from chainfolio.models.asset import Outcome
from chainfolio.models.portfolio import ChainError, PortfolioView, WalletSpec
from chainfolio.services.base_service import BaseService
from chainfolio.services.handlers import ChainHandler, create_handler
from chainfolio.utils.errors import ChainNotFoundError

HandlerFactory = Callable[[ChainDescriptor], ChainHandler]


class AssetAggregator(BaseService):
    """Merges the holdings of many wallets across many chains."""

    def __init__(
        self,
        registry: Optional[Dict[str, ChainDescriptor]] = None,
        handler_factory: Optional[HandlerFactory] = None,
        logger=None
    ):
        """
        Initialize the aggregator.

        Args:
            registry: Chain registry; defaults to the configured one
            handler_factory: Builds the handler for a chain; defaults to
                ``create_handler`` with environment-based settings
            logger: Optional structlog logger
        """
        super().__init__(logger=logger)
        self.registry = registry if registry is not None else get_chain_registry()
        self.handler_factory = handler_factory or create_handler
        self._handlers: Dict[str, ChainHandler] = {}

    def handler_for(self, chain: str) -> ChainHandler:
        """Handler for a chain key, built on first use.

        Raises:
            ChainNotFoundError: If the key is not in the registry
        """
        descriptor = self.registry.get(chain)
        if descriptor is None:
            raise ChainNotFoundError(chain)
        if chain not in self._handlers:
            self._handlers[chain] = self.handler_factory(descriptor)
        return self._handlers[chain]

    async def _fetch(self, address: str, chain: str) -> Outcome:
        try:
            handler = self.handler_for(chain)
        except ChainNotFoundError as e:
            return Outcome.fail(e)
        return await handler.get_all_assets(address)

    async def aggregate(self, wallets: Sequence[WalletSpec]) -> PortfolioView:
        """
        Build the portfolio of the given wallets.

        Args:
            wallets: Wallets with their per-chain enable flags

        Returns:
            PortfolioView with assets in wallet/chain declaration order
        """
        # a wallet/chain pair listed twice is fetched once
        pairs: List[Tuple[str, str]] = list(dict.fromkeys(
            (wallet.address, chain)
            for wallet in wallets
            for chain in wallet.enabled_chains
        ))

        async with self.log_timing("aggregate", wallets=len(wallets), pairs=len(pairs)):
            results = await asyncio.gather(
                *[self._fetch(address, chain) for address, chain in pairs],
                return_exceptions=True
            )

        view = PortfolioView()
        for (address, chain), result in zip(pairs, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                self.logger.error("chain_fetch_crashed", address=address, chain=chain, error=str(result))
                result = Outcome.fail(result)

            if not result.success:
                view.errors.append(ChainError(wallet_address=address, chain=chain, message=result.error))
                continue

            view.assets.extend(result.data or [])
            view.counts[f"{address}:{chain}"] = len(result.data or [])
            if result.warnings:
                view.errors.append(ChainError(
                    wallet_address=address,
                    chain=chain,
                    message="; ".join(result.warnings),
                ))

        self.logger.info(
            "portfolio_aggregated",
            assets=view.total_assets,
            errors=len(view.errors),
        )
        return view
