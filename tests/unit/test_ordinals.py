"""Tests for inscription classification, indexer parsing and fallback."""

from unittest.mock import MagicMock

import httpx
import pytest

from chainfolio.models.asset import AssetType
from chainfolio.services.ordinals.classification import (
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
    parse_hiro,
    parse_magic_eden,
)
from chainfolio.utils.errors import UpstreamParseError, UpstreamTransportError
from tests.fixtures.common import INSCRIPTION_ID, TAPROOT_ADDRESS, RecordingFactory


class TestClassification:
    @pytest.mark.parametrize("raw,kind", [
        ({"title": "Quantum Cat #12"}, InscriptionKind.QUANTUM_CATS),
        ({"collection_id": "quantum-cats"}, InscriptionKind.QUANTUM_CATS),
        ({"content_type": "text/html", "title": "A cat"}, InscriptionKind.QUANTUM_CATS),
        ({"title": "NodeMonke #5", "content_type": "image/png"}, InscriptionKind.NODEMONKES),
        ({"collection_id": "bitcoin-puppets"}, InscriptionKind.BITCOIN_PUPPETS),
        ({"title": "Taproot Wizard 9"}, InscriptionKind.TAPROOT_WIZARDS),
        ({"content_type": "text/html;charset=utf-8"}, InscriptionKind.INTERACTIVE),
        ({"content_type": "application/javascript"}, InscriptionKind.INTERACTIVE),
        ({"content_type": "text/plain"}, InscriptionKind.TEXT),
        ({"content_type": "image/svg+xml"}, InscriptionKind.SVG),
        ({"content_type": "image/png"}, InscriptionKind.STANDARD),
        ({}, InscriptionKind.STANDARD),
    ])
    def test_classify(self, raw, kind):
        assert classify_inscription(raw) == kind

    def test_known_collection_beats_content_type(self):
        raw = {"title": "NodeMonke #1", "content_type": "text/plain"}

        assert classify_inscription(raw) == InscriptionKind.NODEMONKES

    def test_html_beats_text(self):
        assert classify_inscription({"content_type": "text/html"}) == InscriptionKind.INTERACTIVE

    def test_name_prefers_title(self):
        assert inscription_name({"title": "My Art", "number": 3}, InscriptionKind.STANDARD) == "My Art"

    @pytest.mark.parametrize("kind,expected", [
        (InscriptionKind.QUANTUM_CATS, "Quantum Cat #42"),
        (InscriptionKind.SVG, "SVG Inscription #42"),
        (InscriptionKind.STANDARD, "Inscription #42"),
    ])
    def test_name_falls_back_to_prefix(self, kind, expected):
        assert inscription_name({"title": "  ", "number": 42}, kind) == expected

    def test_collection_name(self):
        assert collection_name({"collection_id": "bitcoin-frogs"}, InscriptionKind.STANDARD) == "Bitcoin Frogs"
        assert collection_name({"collection_id": "ord.punks"}, InscriptionKind.STANDARD) == "Ord.Punks"
        assert collection_name({"collection_id": "nodemonkes"}, InscriptionKind.STANDARD) == "Nodemonkes"
        assert collection_name({}, InscriptionKind.TEXT) == "Text Inscriptions"
        assert collection_name({}, InscriptionKind.STANDARD) == "Bitcoin Ordinals"


@pytest.fixture
def ctx(registry, relay_config):
    return ParseContext(chain=registry["bitcoin"], relay=relay_config, logger=MagicMock())


class TestHiroParser:
    def test_parses_results(self, ctx):
        payload = {
            "results": [
                {"id": INSCRIPTION_ID, "number": 7, "content_type": "image/png"},
                {"id": "svgi0", "number": 8, "content_type": "image/svg+xml", "title": "Logo"},
            ]
        }

        standard, svg = parse_hiro(payload, TAPROOT_ADDRESS, ctx)

        assert standard.id == f"btc_{TAPROOT_ADDRESS}_ordinal_{INSCRIPTION_ID}"
        assert standard.type == AssetType.ORDINAL
        assert standard.symbol == "ORD"
        assert standard.balance == standard.balance_formatted == "1"
        assert standard.name == "Inscription #7"
        assert standard.inscription_number == 7
        assert standard.image_url == f"/content/{INSCRIPTION_ID}"
        assert standard.collection_name == "Bitcoin Ordinals"

        assert svg.name == "Logo"
        assert svg.image_url is None
        assert svg.content_type == "image/svg+xml"
        assert svg.content_url == "/content/svgi0"

    def test_skips_malformed_entries(self, ctx):
        payload = {"results": [{"number": 1}, "garbage", {"id": "goodi0", "number": 2}]}

        assets = parse_hiro(payload, TAPROOT_ADDRESS, ctx)

        assert [a.inscription_id for a in assets] == ["goodi0"]
        assert ctx.logger.warning.call_count == 2

    @pytest.mark.parametrize("payload", [None, [], {"results": None}, {"total": 0}])
    def test_wrong_shape_is_empty(self, ctx, payload):
        assert parse_hiro(payload, TAPROOT_ADDRESS, ctx) == []


class TestMagicEdenParser:
    def test_parses_tokens(self, ctx):
        payload = [
            {
                "id": "mei0",
                "inscriptionNumber": 99,
                "contentType": "image/webp",
                "meta": {"name": "Frog 1", "image": "https://img.test/frog.webp"},
                "collectionSymbol": "bitcoin-frogs",
            },
            {"id": "mei1", "inscriptionNumber": 100, "imageURI": "https://img.test/100.png"},
        ]

        frog, plain = parse_magic_eden(payload, TAPROOT_ADDRESS, ctx)

        assert frog.name == "Frog 1"
        assert frog.image_url == "https://img.test/frog.webp"
        assert frog.collection_name == "bitcoin-frogs"
        assert plain.name == "Ordinal #100"
        assert plain.image_url == "https://img.test/100.png"
        assert plain.collection_name == "Bitcoin Ordinals"

    def test_object_payload_is_empty(self, ctx):
        assert parse_magic_eden({"tokens": []}, TAPROOT_ADDRESS, ctx) == []


class TestFirstNonEmpty:
    @pytest.mark.asyncio
    async def test_failure_falls_through(self):
        async def fetch(source):
            if source == "a":
                raise UpstreamTransportError("down", upstream="a", status=503)
            return [source]

        source, items = await first_non_empty(["a", "b"], fetch)

        assert (source, items) == ("b", ["b"])

    @pytest.mark.asyncio
    async def test_empty_falls_through(self):
        async def fetch(source):
            return [] if source == "a" else [1, 2]

        source, items = await first_non_empty(["a", "b"], fetch)

        assert (source, items) == ("b", [1, 2])

    @pytest.mark.asyncio
    async def test_stops_at_first_non_empty(self):
        called = []

        async def fetch(source):
            called.append(source)
            return [source]

        source, items = await first_non_empty(["a", "b"], fetch)

        assert source == "a"
        assert called == ["a"]

    @pytest.mark.asyncio
    async def test_all_failing_is_empty(self):
        async def fetch(source):
            raise UpstreamParseError("bad", upstream=source)

        assert await first_non_empty(["a", "b"], fetch) == (None, [])


class TestOrdinalResolver:
    @pytest.fixture
    def make_resolver(self, registry, relay_config):
        def build(handler, sources_factory=default_sources):
            factory = RecordingFactory(handler)
            resolver = OrdinalResolver(
                registry["bitcoin"],
                relay_config=relay_config,
                sources_factory=sources_factory,
                client_factory=factory,
            )
            return resolver, factory
        return build

    @pytest.mark.asyncio
    async def test_hiro_error_falls_back_to_magic_eden(self, make_resolver):
        def handler(request):
            if request.url.host == "api.hiro.so":
                return httpx.Response(503)
            return httpx.Response(200, json=[{"id": "mei0", "inscriptionNumber": 1}])

        resolver, factory = make_resolver(handler)

        outcome = await resolver.resolve(TAPROOT_ADDRESS)

        assert outcome.success
        assert [a.inscription_id for a in outcome.data] == ["mei0"]
        assert [r.url.host for r in factory.requests] == ["api.hiro.so", "api-mainnet.magiceden.dev"]
        assert factory.requests[0].url.params["address"] == TAPROOT_ADDRESS
        assert factory.requests[1].url.params["owner"] == TAPROOT_ADDRESS
        assert factory.requests[0].headers["accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_hiro_empty_falls_back(self, make_resolver):
        def handler(request):
            if request.url.host == "api.hiro.so":
                return httpx.Response(200, json={"results": []})
            return httpx.Response(200, json=[{"id": "mei0", "inscriptionNumber": 1}])

        resolver, _ = make_resolver(handler)

        outcome = await resolver.resolve(TAPROOT_ADDRESS)

        assert [a.inscription_id for a in outcome.data] == ["mei0"]

    @pytest.mark.asyncio
    async def test_hiro_results_stop_the_search(self, make_resolver):
        resolver, factory = make_resolver(
            lambda request: httpx.Response(200, json={"results": [{"id": INSCRIPTION_ID, "number": 1}]})
        )

        outcome = await resolver.resolve(TAPROOT_ADDRESS)

        assert len(outcome.data) == 1
        assert len(factory.requests) == 1

    @pytest.mark.asyncio
    async def test_every_indexer_failing_is_empty_success(self, make_resolver):
        resolver, factory = make_resolver(lambda request: httpx.Response(500))

        outcome = await resolver.resolve(TAPROOT_ADDRESS)

        assert outcome.success
        assert outcome.data == []
        assert len(factory.requests) == 2

    @pytest.mark.asyncio
    async def test_custom_source(self, make_resolver):
        source = IndexerSource(
            name="local",
            build_url=lambda address: f"https://indexer.test/{address}",
            parse=parse_magic_eden,
        )
        resolver, factory = make_resolver(
            lambda request: httpx.Response(200, json=[{"id": "locali0", "inscriptionNumber": 3}]),
            sources_factory=lambda: [source],
        )

        outcome = await resolver.resolve(TAPROOT_ADDRESS)

        assert [a.inscription_id for a in outcome.data] == ["locali0"]
        assert factory.requests[0].url.path == f"/{TAPROOT_ADDRESS}"
