"""API routes for address classification and asset discovery."""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from chainfolio.config import ChainDescriptor
from chainfolio.dependencies import get_aggregator, get_registry
from chainfolio.logging_config import get_logger
from chainfolio.models.asset import AddressClassification, Asset, Outcome
from chainfolio.models.portfolio import PortfolioRequest, PortfolioView
from chainfolio.services.aggregator import AssetAggregator
from chainfolio.utils.errors import AddressValidationError, ChainNotFoundError
from chainfolio.utils.validation import classify_address

logger = get_logger(__name__)

router = APIRouter(tags=["assets"])


@router.get("/chains")
async def list_chains(registry: Dict[str, ChainDescriptor] = Depends(get_registry)):
    """Supported chains and the features each offers."""
    return [
        {
            "key": chain.key,
            "name": chain.name,
            "symbol": chain.symbol,
            "kind": chain.kind,
            "features": sorted(chain.features),
            "chainId": chain.chain_id,
            "explorerUrl": chain.explorer_url,
        }
        for chain in registry.values()
    ]


@router.get("/address/{address}/classify", response_model=AddressClassification, response_model_by_alias=True)
async def classify(
    address: str,
    chain: Optional[str] = Query(None, description="Restrict to one chain's address format"),
    registry: Dict[str, ChainDescriptor] = Depends(get_registry),
):
    """Classify an address string; unrecognized input is reported as invalid."""
    return classify_address(address, chain=chain, registry=registry)


@router.get("/assets/{chain}/{address}", response_model=Outcome[List[Asset]], response_model_by_alias=True)
async def chain_assets(
    chain: str,
    address: str,
    registry: Dict[str, ChainDescriptor] = Depends(get_registry),
    aggregator: AssetAggregator = Depends(get_aggregator),
):
    """All assets of one address on one chain."""
    if chain not in registry:
        raise ChainNotFoundError(chain)
    if not classify_address(address, chain=chain, registry=registry).valid:
        raise AddressValidationError(address, chain)

    outcome = await aggregator.handler_for(chain).get_all_assets(address)
    logger.info(
        "chain_assets_served",
        chain=chain,
        address=address,
        success=outcome.success,
        count=len(outcome.data or []),
    )
    return outcome


@router.post("/portfolio", response_model=PortfolioView, response_model_by_alias=True)
async def portfolio(
    request: PortfolioRequest,
    aggregator: AssetAggregator = Depends(get_aggregator),
):
    """Merged holdings of every enabled wallet/chain pair."""
    return await aggregator.aggregate(request.wallets)
