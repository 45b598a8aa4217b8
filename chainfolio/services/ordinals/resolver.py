"""
Ordinal resolution with indexer fallback.
"""

from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from chainfolio.clients.base_client import BaseHttpClient, ClientFactory
from chainfolio.config import ChainDescriptor, RelayConfig, get_relay_config
from chainfolio.models.asset import Asset, Outcome
from chainfolio.services.base_service import BaseService
from chainfolio.services.ordinals.classification import DEFAULT_RULES, ClassificationRule
from chainfolio.services.ordinals.sources import IndexerSource, ParseContext, default_sources
from chainfolio.utils.errors import ChainfolioError

S = TypeVar("S")
T = TypeVar("T")

INDEXER_HEADERS = {"Accept": "application/json"}


async def first_non_empty(
    sources: Sequence[S],
    fetch: Callable[[S], Awaitable[List[T]]],
    logger=None,
    name: Callable[[S], str] = lambda source: getattr(source, "name", repr(source))
) -> Tuple[Optional[S], List[T]]:
    """
    Try ``sources`` in order and return the first non-empty result.

    A source that raises a ChainfolioError or returns an empty list is skipped.
    Other exceptions, cancellation included, propagate.

    Args:
        sources: Candidates, tried in the given order
        fetch: Coroutine function producing a list for one source
        logger: Optional structlog logger
        name: Label of a source in log events

    Returns:
        ``(source, items)`` for the first source with items, else ``(None, [])``
    """
    for source in sources:
        try:
            items = await fetch(source)
        except ChainfolioError as e:
            if logger:
                logger.warning("source_failed", source=name(source), error_code=e.code.value, error=e.message)
            continue
        if items:
            if logger:
                logger.info("source_succeeded", source=name(source), count=len(items))
            return source, items
        if logger:
            logger.info("source_empty", source=name(source))
    return None, []


class OrdinalResolver(BaseService):
    """Finds the inscriptions held by a Bitcoin address."""

    def __init__(
        self,
        chain: ChainDescriptor,
        relay_config: Optional[RelayConfig] = None,
        sources_factory: Callable[[], Sequence[IndexerSource]] = default_sources,
        rules: Sequence[ClassificationRule] = DEFAULT_RULES,
        client_factory: Optional[ClientFactory] = None,
        logger=None
    ):
        """
        Initialize the resolver.

        Args:
            chain: Descriptor of the Bitcoin chain the inscriptions live on
            relay_config: Builds the relay URLs placed on each asset
            sources_factory: Returns the indexers to try, in order
            rules: Inscription classification rules
            client_factory: Callable returning a fresh ``httpx.AsyncClient``
            logger: Optional structlog logger
        """
        super().__init__(client_factory=client_factory, logger=logger)
        self.chain = chain
        self.relay_config = relay_config or get_relay_config()
        self.sources_factory = sources_factory
        self.rules = rules
        self.logger = self.logger.bind(chain=chain.key)

    async def resolve(self, address: str) -> Outcome:
        """
        Resolve ordinals for an address.

        Indexer failures never fail the call; when no indexer returns
        anything the result is an empty success.

        Args:
            address: Bitcoin address (validated by the caller)

        Returns:
            Outcome carrying a list of ordinal Assets
        """
        return await self.capture("ordinals", self._resolve(address), address=address)

    async def _resolve(self, address: str) -> List[Asset]:
        logger = self.logger.bind(address=address)
        ctx = ParseContext(chain=self.chain, relay=self.relay_config, logger=logger, rules=self.rules)

        async with self.client_factory() as http:
            async def fetch(source: IndexerSource) -> List[Asset]:
                client = BaseHttpClient(http, upstream=source.name, logger=logger)
                payload = await client.get_json(source.build_url(address), headers=INDEXER_HEADERS)
                return source.parse(payload, address, ctx)

            source, assets = await first_non_empty(self.sources_factory(), fetch, logger=logger)

        if source is None:
            logger.info("no_ordinals_found")
        return assets
