"""Esplora REST client (Blockstream / mempool.space compatible)."""

from dataclasses import dataclass
from typing import Any, Dict
from urllib.parse import quote

import httpx

from chainfolio.clients.base_client import BaseHttpClient
from chainfolio.utils.errors import UpstreamParseError


@dataclass(frozen=True)
class AddressStats:
    """Funded/spent output totals of an address, in satoshis."""

    funded: int
    spent: int
    tx_count: int = 0

    @property
    def balance(self) -> int:
        return self.funded - self.spent


class EsploraClient(BaseHttpClient):
    """Client for the UTXO address-summary endpoint."""

    upstream = "esplora"

    def __init__(self, http: httpx.AsyncClient, api_base: str, logger=None):
        super().__init__(http, logger=logger)
        self.api_base = api_base.rstrip("/")

    async def get_address_summary(self, address: str) -> Dict[str, Any]:
        """Raw ``/address/<address>`` payload.

        Raises:
            UpstreamTransportError: On network failure or non-2xx status
            UpstreamParseError: If the body is not a JSON object
        """
        payload = await self.get_json(f"{self.api_base}/address/{quote(address)}")
        if not isinstance(payload, dict):
            raise UpstreamParseError("address summary is not an object", upstream=self.upstream)
        return payload

    async def get_confirmed_stats(self, address: str) -> AddressStats:
        """Confirmed funded/spent totals, read from ``chain_stats``.

        Mempool activity is ignored so the balance reflects confirmed state only.
        """
        payload = await self.get_address_summary(address)
        stats = payload.get("chain_stats")
        if not isinstance(stats, dict):
            raise UpstreamParseError("address summary has no chain_stats", upstream=self.upstream)
        try:
            return AddressStats(
                funded=int(stats["funded_txo_sum"]),
                spent=int(stats["spent_txo_sum"]),
                tx_count=int(stats.get("tx_count", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamParseError(f"malformed chain_stats: {e}", upstream=self.upstream) from e
