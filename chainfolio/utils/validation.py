"""Address validation utilities for Chainfolio.

Classifies address strings against the formats accepted by each supported
chain family. Classification fails closed: anything unrecognized is
reported as invalid, and nothing here raises.
"""

import re
from typing import Dict, List, Optional, Tuple

from web3 import Web3

from chainfolio.config import ChainDescriptor, get_chain_registry
from chainfolio.models.asset import AddressClassification

# Bitcoin address patterns, checked in this order
BTC_TAPROOT_PATTERN = re.compile(r"^bc1p[a-z0-9]{58}$")
BTC_SEGWIT_PATTERN = re.compile(r"^bc1[a-z0-9]{39,59}$")
BTC_LEGACY_PATTERN = re.compile(r"^[13][a-km-zA-HJ-NP-Z1-9]{25,34}$")

EVM_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")

FORMAT_HEX = "hex"
FORMAT_BASE58 = "base58"
FORMAT_BECH32 = "bech32"
FORMAT_UNKNOWN = "unknown"

KIND_EVM = "evm"
KIND_BITCOIN = "bitcoin"


def _classify_bitcoin(address: str) -> Optional[Tuple[str, str]]:
    if BTC_TAPROOT_PATTERN.match(address):
        return FORMAT_BECH32, "taproot"
    if BTC_SEGWIT_PATTERN.match(address):
        return FORMAT_BECH32, "segwit"
    if BTC_LEGACY_PATTERN.match(address):
        return FORMAT_BASE58, "legacy" if address[0] == "1" else "p2sh"
    return None


def is_valid_evm_checksum(address: str) -> bool:
    """Check EIP-55 casing. Single-case addresses carry no checksum and pass."""
    body = address[2:]
    if body == body.lower() or body == body.upper():
        return True
    return Web3.to_checksum_address(address) == address


def _classify_evm(address: str) -> Optional[Tuple[str, str]]:
    if not EVM_ADDRESS_PATTERN.match(address):
        return None
    if not is_valid_evm_checksum(address):
        return None
    return FORMAT_HEX, "evm"


_CLASSIFIERS = {
    KIND_BITCOIN: _classify_bitcoin,
    KIND_EVM: _classify_evm,
}


def classify_address(
    address: str,
    chain: Optional[str] = None,
    registry: Optional[Dict[str, ChainDescriptor]] = None
) -> AddressClassification:
    """Classify an address string.

    Args:
        address: The address to classify
        chain: Optional chain key; when given only that chain's format
            family is accepted
        registry: Chain registry used to resolve ``chain`` and compatible
            chains; defaults to the configured registry

    Returns:
        AddressClassification; ``valid`` is False for anything unrecognized
    """
    invalid = AddressClassification(valid=False, format=FORMAT_UNKNOWN)
    if not address or not isinstance(address, str):
        return invalid

    registry = registry if registry is not None else get_chain_registry()

    if chain is not None:
        descriptor = registry.get(chain)
        if descriptor is None or descriptor.kind not in _CLASSIFIERS:
            return invalid
        kinds = [descriptor.kind]
    else:
        kinds = list(_CLASSIFIERS)

    for kind in kinds:
        match = _CLASSIFIERS[kind](address)
        if match:
            address_format, address_type = match
            return AddressClassification(
                valid=True,
                format=address_format,
                address_type=address_type,
                compatible_chains=_compatible_chains(kind, registry),
            )

    return invalid


def _compatible_chains(kind: str, registry: Dict[str, ChainDescriptor]) -> List[str]:
    return [key for key, descriptor in registry.items() if descriptor.kind == kind]


def is_valid_address(address: str, chain: str, registry: Optional[Dict[str, ChainDescriptor]] = None) -> bool:
    """Return True if ``address`` is acceptable on ``chain``."""
    return classify_address(address, chain=chain, registry=registry).valid
