"""Alchemy NFT API client."""

from typing import Any, Dict, List

import httpx

from chainfolio.clients.base_client import BaseHttpClient
from chainfolio.utils.errors import UpstreamParseError


class AlchemyNftClient(BaseHttpClient):
    """Fetches NFTs owned by an address from Alchemy's ``getNFTs`` endpoint."""

    upstream = "alchemy"

    def __init__(self, http: httpx.AsyncClient, url_template: str, api_key: str, logger=None):
        """
        Args:
            http: Caller-owned HTTP client
            url_template: Endpoint URL with an ``{api_key}`` placeholder
            api_key: Alchemy API key
            logger: Optional structlog logger
        """
        super().__init__(http, logger=logger)
        self.url = url_template.format(api_key=api_key)

    async def get_owned_nfts(self, owner: str) -> List[Dict[str, Any]]:
        """Raw ``ownedNfts`` entries for ``owner``.

        A response without ``ownedNfts`` means the owner holds nothing.
        """
        payload = await self.get_json(self.url, params={"owner": owner})
        if not isinstance(payload, dict):
            raise UpstreamParseError("getNFTs response is not an object", upstream=self.upstream)
        owned = payload.get("ownedNfts")
        if owned is None:
            return []
        if not isinstance(owned, list):
            raise UpstreamParseError("ownedNfts is not a list", upstream=self.upstream)
        return owned
