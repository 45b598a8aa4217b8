"""Data models for Chainfolio."""

from chainfolio.models.asset import (
    AddressClassification,
    Asset,
    AssetType,
    Outcome,
    asset_id,
)
from chainfolio.models.portfolio import (
    ChainError,
    PortfolioRequest,
    PortfolioView,
    WalletSpec,
)

__all__ = [
    "AddressClassification",
    "Asset",
    "AssetType",
    "ChainError",
    "Outcome",
    "PortfolioRequest",
    "PortfolioView",
    "WalletSpec",
    "asset_id",
]
