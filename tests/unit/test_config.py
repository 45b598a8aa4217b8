"""Tests for configuration helpers and the chain registry."""

import pytest

from chainfolio.config import (
    FEATURE_NFTS,
    FEATURE_ORDINALS,
    FEATURE_TOKENS,
    ApiKeys,
    RelayConfig,
    build_chain_registry,
    get_env_var,
    int_validator,
    url_validator,
)


class TestApiKeys:
    @pytest.mark.parametrize("key", [None, "", "  ", "your_alchemy_key_here"])
    def test_missing_or_placeholder_key(self, key):
        assert not ApiKeys(alchemy=key).has_alchemy

    def test_real_key(self):
        assert ApiKeys(alchemy="abc123").has_alchemy


class TestChainRegistry:
    def test_chains_and_features(self, registry):
        assert list(registry) == ["bitcoin", "ethereum", "pulsechain"]
        assert registry["bitcoin"].features == frozenset({FEATURE_ORDINALS})
        assert registry["ethereum"].features == frozenset({FEATURE_TOKENS, FEATURE_NFTS})
        assert registry["pulsechain"].features == frozenset({FEATURE_TOKENS})

    def test_token_lists(self, registry):
        assert [t.symbol for t in registry["ethereum"].tokens] == ["HEX", "USDC", "USDT", "LINK"]
        assert [t.symbol for t in registry["pulsechain"].tokens] == ["HEX", "PLSX", "INC"]
        assert registry["ethereum"].tokens[0].decimals == 8

    def test_ethereum_rpc_uses_alchemy_with_key(self, monkeypatch):
        monkeypatch.delenv("ETH_RPC_URL", raising=False)

        registry = build_chain_registry(ApiKeys(alchemy="abc123"))

        assert registry["ethereum"].rpc_url == "https://eth-mainnet.g.alchemy.com/v2/abc123"

    def test_ethereum_rpc_public_without_key(self, monkeypatch):
        monkeypatch.delenv("ETH_RPC_URL", raising=False)

        registry = build_chain_registry(ApiKeys())

        assert "alchemy" not in registry["ethereum"].rpc_url

    def test_rpc_override(self, monkeypatch):
        monkeypatch.setenv("PULSECHAIN_RPC_URL", "https://pulse.example/rpc/")

        registry = build_chain_registry(ApiKeys())

        assert registry["pulsechain"].rpc_url == "https://pulse.example/rpc"


class TestEnvVars:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("CHAINFOLIO_TEST_VAR", raising=False)
        assert get_env_var("CHAINFOLIO_TEST_VAR", 7, validator=int_validator) == 7

    def test_validator_failure(self, monkeypatch):
        monkeypatch.setenv("CHAINFOLIO_TEST_VAR", "seven")
        with pytest.raises(ValueError):
            get_env_var("CHAINFOLIO_TEST_VAR", validator=int_validator)

    def test_required(self, monkeypatch):
        monkeypatch.delenv("CHAINFOLIO_TEST_VAR", raising=False)
        with pytest.raises(ValueError):
            get_env_var("CHAINFOLIO_TEST_VAR", required=True)

    def test_url_validator(self):
        with pytest.raises(ValueError):
            url_validator("ftp://example.com")


def test_relay_urls():
    relay = RelayConfig(content_host="https://ordinals.com", public_base="https://api.example")

    assert relay.upstream_url("abci0") == "https://ordinals.com/content/abci0"
    assert relay.content_url("abci0") == "https://api.example/content/abci0"
    assert RelayConfig().content_url("abci0") == "/content/abci0"
