"""Portfolio request and response models."""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from chainfolio.models.asset import Asset, utc_now


class WalletSpec(BaseModel):
    """A wallet address and the chains enabled for it."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    address: str = Field(..., description="Wallet address as stored by the caller")
    chains: Dict[str, bool] = Field(default_factory=dict, description="Chain key -> enabled flag")

    @property
    def enabled_chains(self) -> List[str]:
        return [chain for chain, enabled in self.chains.items() if enabled]


class PortfolioRequest(BaseModel):
    wallets: List[WalletSpec]


class ChainError(BaseModel):
    """Non-fatal note about a chain that contributed no assets."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    wallet_address: str
    chain: str
    message: str


class PortfolioView(BaseModel):
    """Merged holdings of every enabled wallet/chain pair."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    assets: List[Asset] = Field(default_factory=list)
    errors: List[ChainError] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict, description="'<address>:<chain>' -> asset count")
    last_updated: datetime = Field(default_factory=utc_now)

    @computed_field(alias="totalAssets")
    @property
    def total_assets(self) -> int:
        return sum(self.counts.values())

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
