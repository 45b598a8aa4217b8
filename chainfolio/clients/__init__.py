"""Upstream API clients used by the chain handlers."""

from chainfolio.clients.alchemy_client import AlchemyNftClient
from chainfolio.clients.base_client import (
    BaseHttpClient,
    ClientFactory,
    JsonRpcClient,
    default_client_factory,
)
from chainfolio.clients.esplora_client import AddressStats, EsploraClient
from chainfolio.clients.evm_client import EvmRpcClient

__all__ = [
    "AddressStats",
    "AlchemyNftClient",
    "BaseHttpClient",
    "ClientFactory",
    "EsploraClient",
    "EvmRpcClient",
    "JsonRpcClient",
    "default_client_factory",
]
