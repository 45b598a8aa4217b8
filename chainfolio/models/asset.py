"""
Asset data models for Chainfolio.

This module defines the normalized asset representation shared by every
chain handler, the tagged outcome wrapper returned by public operations,
and the address classification result.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chainfolio.utils.errors import ChainfolioError, ErrorCode

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AssetType(str, Enum):
    """Closed set of asset variants."""

    NATIVE = "native"
    TOKEN = "token"
    NFT = "nft"
    ORDINAL = "ordinal"


def asset_id(id_prefix: str, address: str, *parts: Any) -> str:
    """Build a deterministic asset id from chain prefix, owner and sub-identifiers.

    >>> asset_id("eth", "0xabc", "native")
    'eth_0xabc_native'
    """
    return "_".join([id_prefix, address, *(str(p) for p in parts)])


class Asset(BaseModel):
    """
    Normalized, immutable holding of a single wallet on a single chain.

    ``balance`` is an integer string in the asset's smallest unit;
    ``balance_formatted`` is derived from it. The optional fields are only
    meaningful for the variants named beside them.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    type: AssetType
    chain: str
    wallet_address: str

    name: str
    symbol: str
    decimals: Optional[int] = None

    balance: str
    balance_formatted: str

    # token / nft
    contract_address: Optional[str] = None
    token_standard: Optional[str] = None

    # nft
    token_id: Optional[str] = None
    image_url: Optional[str] = None
    collection_name: Optional[str] = None
    floor_price: Optional[float] = None

    # ordinal
    inscription_id: Optional[str] = None
    inscription_number: Optional[int] = None
    content_type: Optional[str] = None
    content_url: Optional[str] = None

    last_updated: datetime = Field(default_factory=utc_now)

    def fingerprint(self) -> Dict[str, Any]:
        """Asset data without the fetch timestamp, for comparing refreshes."""
        return self.model_dump(exclude={"last_updated"})


class Outcome(BaseModel, Generic[T]):
    """Tagged success/failure result of a public operation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    # Non-fatal problems, e.g. a sub-fetch that failed inside a successful call
    warnings: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)

    @classmethod
    def ok(cls, data: T, warnings: Optional[List[str]] = None) -> "Outcome[T]":
        return cls(success=True, data=data, warnings=warnings or [])

    @classmethod
    def fail(cls, error: Union[str, Exception], code: Optional[ErrorCode] = None) -> "Outcome[T]":
        """Build a failed outcome from a message or an exception."""
        if isinstance(error, ChainfolioError):
            code = code or error.code
            message = error.message
        else:
            message = str(error)
        code = code or ErrorCode.UNKNOWN_ERROR
        return cls(success=False, error=message, error_code=code.value)


class AddressClassification(BaseModel):
    """Result of classifying an address string."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    valid: bool
    format: str
    address_type: Optional[str] = None
    compatible_chains: List[str] = Field(default_factory=list)
