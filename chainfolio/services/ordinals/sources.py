"""
Ordinal indexer sources.

Each source pairs a URL builder with a parser that turns the indexer's JSON
payload into ordinal Assets. Parsers skip malformed entries and treat a
payload of the wrong overall shape as "nothing found".
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import quote

from chainfolio.config import ChainDescriptor, RelayConfig
from chainfolio.models.asset import Asset, AssetType, asset_id
from chainfolio.services.ordinals.classification import (
    DEFAULT_RULES,
    ClassificationRule,
    classify_inscription,
    collection_name,
    image_url_for,
    inscription_name,
)

HIRO_INSCRIPTIONS_URL = "https://api.hiro.so/ordinals/v1/inscriptions"
MAGIC_EDEN_TOKENS_URL = "https://api-mainnet.magiceden.dev/v2/ord/btc/tokens"

ORDINAL_SYMBOL = "ORD"

# Per-entry parse failures; pydantic's ValidationError is a ValueError
ENTRY_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


@dataclass(frozen=True)
class ParseContext:
    """What a parser needs besides the payload."""

    chain: ChainDescriptor
    relay: RelayConfig
    logger: Any
    rules: Sequence[ClassificationRule] = DEFAULT_RULES


@dataclass(frozen=True)
class IndexerSource:
    """One ordinal indexer: how to reach it and how to read its answer."""

    name: str
    build_url: Callable[[str], str]
    parse: Callable[[Any, str, ParseContext], List[Asset]]


def _ordinal_asset(
    ctx: ParseContext,
    address: str,
    inscription_id: str,
    **fields: Any
) -> Asset:
    if not isinstance(inscription_id, str) or not inscription_id:
        raise ValueError(f"inscription id missing or not a string: {inscription_id!r}")
    return Asset(
        id=asset_id(ctx.chain.id_prefix, address, "ordinal", inscription_id),
        type=AssetType.ORDINAL,
        chain=ctx.chain.key,
        wallet_address=address,
        symbol=ORDINAL_SYMBOL,
        balance="1",
        balance_formatted="1",
        token_id=inscription_id,
        inscription_id=inscription_id,
        content_url=ctx.relay.content_url(inscription_id),
        **fields
    )


def _as_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def parse_hiro(payload: Any, address: str, ctx: ParseContext) -> List[Asset]:
    """Parse a Hiro ``/ordinals/v1/inscriptions`` response (reads ``results``)."""
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        return []

    assets = []
    for inscription in results:
        try:
            kind = classify_inscription(inscription, ctx.rules)
            inscription_id = inscription["id"]
            relay_url = ctx.relay.content_url(inscription_id)
            assets.append(_ordinal_asset(
                ctx,
                address,
                inscription_id,
                name=inscription_name(inscription, kind),
                inscription_number=_as_int(inscription.get("number")),
                content_type=inscription.get("content_type"),
                image_url=image_url_for(kind, relay_url),
                collection_name=collection_name(inscription, kind),
            ))
        except ENTRY_ERRORS as e:
            ctx.logger.warning("inscription_entry_skipped", source="hiro", address=address, error=str(e))
    return assets


def parse_magic_eden(payload: Any, address: str, ctx: ParseContext) -> List[Asset]:
    """Parse a Magic Eden ``/v2/ord/btc/tokens`` response (a top-level array)."""
    if not isinstance(payload, list):
        return []

    assets = []
    for token in payload:
        try:
            meta: Dict[str, Any] = token.get("meta") or {}
            number = _as_int(token.get("inscriptionNumber"))
            assets.append(_ordinal_asset(
                ctx,
                address,
                token["id"],
                name=meta.get("name") or f"Ordinal #{number}",
                inscription_number=number,
                content_type=token.get("contentType"),
                image_url=meta.get("image") or token.get("imageURI"),
                collection_name=token.get("collectionSymbol") or "Bitcoin Ordinals",
            ))
        except ENTRY_ERRORS as e:
            ctx.logger.warning("inscription_entry_skipped", source="magic-eden", address=address, error=str(e))
    return assets


def hiro_source(base_url: str = HIRO_INSCRIPTIONS_URL) -> IndexerSource:
    return IndexerSource(
        name="hiro",
        build_url=lambda address: f"{base_url}?address={quote(address)}",
        parse=parse_hiro,
    )


def magic_eden_source(base_url: str = MAGIC_EDEN_TOKENS_URL) -> IndexerSource:
    return IndexerSource(
        name="magic-eden",
        build_url=lambda address: f"{base_url}?owner={quote(address)}",
        parse=parse_magic_eden,
    )


def default_sources() -> List[IndexerSource]:
    """Indexers in the order they are tried."""
    return [hiro_source(), magic_eden_source()]
