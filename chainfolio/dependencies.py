"""
FastAPI dependency providers.

Routes obtain configuration and services through these functions so tests can
swap them with ``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Dict

from chainfolio.clients.base_client import ClientFactory, default_client_factory
from chainfolio.config import ChainDescriptor, RelayConfig, get_chain_registry, get_relay_config
from chainfolio.services.aggregator import AssetAggregator


def get_registry() -> Dict[str, ChainDescriptor]:
    return get_chain_registry()


@lru_cache()
def get_aggregator() -> AssetAggregator:
    """Process-wide aggregator; handlers are stateless so one instance is shared."""
    return AssetAggregator(registry=get_chain_registry())


def get_relay_settings() -> RelayConfig:
    return get_relay_config()


def get_relay_client_factory() -> ClientFactory:
    """HTTP client factory used by the content relay."""
    return default_client_factory()
