"""Tests for address classification."""

import pytest

from chainfolio.utils.validation import classify_address, is_valid_address, is_valid_evm_checksum
from tests.fixtures.common import EVM_ADDRESS, LEGACY_ADDRESS, SEGWIT_ADDRESS, TAPROOT_ADDRESS

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestClassifyAddress:
    """Test suite for classify_address."""

    def test_taproot(self, registry):
        result = classify_address(TAPROOT_ADDRESS, registry=registry)

        assert result.valid
        assert result.format == "bech32"
        assert result.address_type == "taproot"
        assert result.compatible_chains == ["bitcoin"]

    def test_segwit(self, registry):
        result = classify_address(SEGWIT_ADDRESS, registry=registry)

        assert result.valid
        assert result.format == "bech32"
        assert result.address_type == "segwit"

    @pytest.mark.parametrize("address,address_type", [
        (LEGACY_ADDRESS, "legacy"),
        ("3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy", "p2sh"),
    ])
    def test_base58(self, registry, address, address_type):
        result = classify_address(address, registry=registry)

        assert result.valid
        assert result.format == "base58"
        assert result.address_type == address_type

    def test_evm_lowercase(self, registry):
        result = classify_address(EVM_ADDRESS, registry=registry)

        assert result.valid
        assert result.format == "hex"
        assert result.compatible_chains == ["ethereum", "pulsechain"]

    def test_evm_checksummed(self, registry):
        assert classify_address(CHECKSUMMED, registry=registry).valid

    def test_evm_bad_checksum_rejected(self, registry):
        # Last character's case flipped
        result = classify_address(CHECKSUMMED[:-1] + "D", registry=registry)

        assert not result.valid
        assert result.format == "unknown"

    @pytest.mark.parametrize("address", [
        "",
        "not-an-address",
        "0x1234",
        "0x" + "g" * 40,
        "bc1" + "q" * 10,
        "2NBFNJTktNa7GZusGbDbGKRZTxdK9VVez3n",
        None,
        12345,
    ])
    def test_invalid_inputs_never_raise(self, registry, address):
        result = classify_address(address, registry=registry)

        assert not result.valid
        assert result.compatible_chains == []

    def test_chain_restricts_format_family(self, registry):
        assert not classify_address(EVM_ADDRESS, chain="bitcoin", registry=registry).valid
        assert not classify_address(TAPROOT_ADDRESS, chain="ethereum", registry=registry).valid
        assert classify_address(TAPROOT_ADDRESS, chain="bitcoin", registry=registry).valid

    def test_unknown_chain_is_invalid(self, registry):
        assert not classify_address(EVM_ADDRESS, chain="solana", registry=registry).valid


def test_is_valid_address(registry):
    assert is_valid_address(EVM_ADDRESS, "pulsechain", registry=registry)
    assert not is_valid_address(LEGACY_ADDRESS, "pulsechain", registry=registry)


def test_single_case_addresses_skip_checksum():
    assert is_valid_evm_checksum("0x" + "AB" * 20)
    assert is_valid_evm_checksum(CHECKSUMMED.lower())
