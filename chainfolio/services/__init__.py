"""Chain handlers, ordinal resolution and portfolio aggregation."""

from chainfolio.services.aggregator import AssetAggregator
from chainfolio.services.base_service import BaseService
from chainfolio.services.bitcoin_handler import BitcoinChainHandler
from chainfolio.services.evm_handler import EvmChainHandler
from chainfolio.services.handlers import ChainHandler, create_handler
from chainfolio.services.ordinals import OrdinalResolver

__all__ = [
    "AssetAggregator",
    "BaseService",
    "BitcoinChainHandler",
    "ChainHandler",
    "EvmChainHandler",
    "OrdinalResolver",
    "create_handler",
]
