"""Ordinals inscription discovery and classification."""

from chainfolio.services.ordinals.classification import (
    DEFAULT_RULES,
    ClassificationRule,
    InscriptionKind,
    classify_inscription,
    collection_name,
    inscription_name,
)
from chainfolio.services.ordinals.resolver import OrdinalResolver, first_non_empty
from chainfolio.services.ordinals.sources import (
    IndexerSource,
    ParseContext,
    default_sources,
    hiro_source,
    magic_eden_source,
    parse_hiro,
    parse_magic_eden,
)

__all__ = [
    "DEFAULT_RULES",
    "ClassificationRule",
    "IndexerSource",
    "InscriptionKind",
    "OrdinalResolver",
    "ParseContext",
    "classify_inscription",
    "collection_name",
    "default_sources",
    "first_non_empty",
    "hiro_source",
    "inscription_name",
    "magic_eden_source",
    "parse_hiro",
    "parse_magic_eden",
]
