"""
Inscription classification.

Maps raw inscription metadata onto a closed set of kinds with an ordered rule
table: the first rule whose predicate matches wins, and anything unmatched is
``standard``. Known collections are listed before content-type families so a
collection member is never reported by its media type.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence


class InscriptionKind(str, Enum):
    QUANTUM_CATS = "quantum-cats"
    NODEMONKES = "nodemonkes"
    BITCOIN_PUPPETS = "bitcoin-puppets"
    TAPROOT_WIZARDS = "taproot-wizards"
    INTERACTIVE = "interactive"
    TEXT = "text"
    SVG = "svg"
    STANDARD = "standard"


@dataclass(frozen=True)
class KindInfo:
    """Display attributes of an inscription kind."""

    name_prefix: str
    collection_label: str
    # False for kinds whose content cannot be shown as an image
    renders_as_image: bool = True


KIND_INFO: Dict[InscriptionKind, KindInfo] = {
    InscriptionKind.QUANTUM_CATS: KindInfo("Quantum Cat", "Quantum Cats"),
    InscriptionKind.NODEMONKES: KindInfo("NodeMonke", "NodeMonkes"),
    InscriptionKind.BITCOIN_PUPPETS: KindInfo("Bitcoin Puppet", "Bitcoin Puppets"),
    InscriptionKind.TAPROOT_WIZARDS: KindInfo("Taproot Wizard", "Taproot Wizards"),
    InscriptionKind.INTERACTIVE: KindInfo("Interactive Inscription", "Interactive Ordinals", False),
    InscriptionKind.TEXT: KindInfo("Text Inscription", "Text Inscriptions", False),
    InscriptionKind.SVG: KindInfo("SVG Inscription", "SVG Inscriptions", False),
    InscriptionKind.STANDARD: KindInfo("Inscription", "Bitcoin Ordinals"),
}


@dataclass(frozen=True)
class InscriptionFacts:
    """Lower-cased fields the classification rules look at."""

    title: str = ""
    content_type: str = ""
    collection_id: str = ""

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "InscriptionFacts":
        def text(key: str) -> str:
            value = raw.get(key)
            return value.lower() if isinstance(value, str) else ""

        return cls(
            title=text("title"),
            content_type=text("content_type"),
            collection_id=text("collection_id"),
        )


@dataclass(frozen=True)
class ClassificationRule:
    kind: InscriptionKind
    matches: Callable[[InscriptionFacts], bool]


def collection_rule(kind: InscriptionKind, title_marker: str) -> ClassificationRule:
    """Rule matching a title substring or the kind's value inside ``collection_id``."""
    return ClassificationRule(
        kind,
        lambda facts: title_marker in facts.title or kind.value in facts.collection_id,
    )


def content_rule(kind: InscriptionKind, *markers: str) -> ClassificationRule:
    """Rule matching any of ``markers`` inside the content type."""
    return ClassificationRule(
        kind,
        lambda facts: any(marker in facts.content_type for marker in markers),
    )


def _is_quantum_cat(facts: InscriptionFacts) -> bool:
    return (
        "quantum cat" in facts.title
        or "quantum-cats" in facts.collection_id
        or ("html" in facts.content_type and "cat" in facts.title)
    )


DEFAULT_RULES: Sequence[ClassificationRule] = (
    ClassificationRule(InscriptionKind.QUANTUM_CATS, _is_quantum_cat),
    collection_rule(InscriptionKind.NODEMONKES, "nodemonke"),
    collection_rule(InscriptionKind.BITCOIN_PUPPETS, "bitcoin puppet"),
    collection_rule(InscriptionKind.TAPROOT_WIZARDS, "taproot wizard"),
    # html must precede text so "text/html" is interactive
    content_rule(InscriptionKind.INTERACTIVE, "html", "javascript"),
    content_rule(InscriptionKind.TEXT, "text"),
    content_rule(InscriptionKind.SVG, "svg"),
)


def classify_inscription(
    raw: Mapping[str, Any],
    rules: Sequence[ClassificationRule] = DEFAULT_RULES
) -> InscriptionKind:
    """Return the kind of the first rule matching ``raw``, else ``standard``."""
    facts = InscriptionFacts.from_raw(raw)
    for rule in rules:
        if rule.matches(facts):
            return rule.kind
    return InscriptionKind.STANDARD


def inscription_name(raw: Mapping[str, Any], kind: InscriptionKind) -> str:
    """Source title when non-blank, else ``<prefix> #<number>``."""
    title = raw.get("title")
    if isinstance(title, str) and title.strip():
        return title
    return f"{KIND_INFO[kind].name_prefix} #{raw.get('number')}"


def collection_name(raw: Mapping[str, Any], kind: InscriptionKind) -> str:
    """Humanized ``collection_id`` when present, else the kind's collection label.

    >>> collection_name({"collection_id": "bitcoin-frogs"}, InscriptionKind.STANDARD)
    'Bitcoin Frogs'
    """
    collection_id = raw.get("collection_id")
    if isinstance(collection_id, str) and collection_id:
        return re.sub(r"\b\w", lambda m: m.group().upper(), collection_id.replace("-", " "))
    return KIND_INFO[kind].collection_label


def image_url_for(kind: InscriptionKind, content_url: Optional[str]) -> Optional[str]:
    """Image reference for image-bearing kinds; None for the rest."""
    return content_url if KIND_INFO[kind].renders_as_image else None
