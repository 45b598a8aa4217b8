"""Base HTTP and JSON-RPC clients for Chainfolio.

This module provides the core functionality for making requests to
upstream APIs and JSON-RPC nodes. Clients borrow an ``httpx.AsyncClient``
owned by the caller; they never open or close connections themselves.
"""

# Standard library imports
import asyncio
import json
from typing import Any, Callable, Dict, List, Optional

# Third-party library imports
import httpx

# Internal imports
from chainfolio.config import FetchConfig, get_fetch_config
from chainfolio.logging_config import get_logger
from chainfolio.utils.errors import RpcError, UpstreamParseError, UpstreamTransportError

ClientFactory = Callable[[], httpx.AsyncClient]

RETRIABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def default_client_factory(config: Optional[FetchConfig] = None) -> ClientFactory:
    """Build a factory producing short-lived HTTP clients.

    Args:
        config: Fetch configuration. Defaults to environment-based config.

    Returns:
        Zero-argument callable returning a new ``httpx.AsyncClient``
    """
    config = config or get_fetch_config()

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=config.request_timeout,
            headers={"User-Agent": config.user_agent},
            follow_redirects=True,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )

    return factory


class BaseHttpClient:
    """Thin JSON-over-HTTP client bound to one upstream."""

    upstream = "http"

    def __init__(self, http: httpx.AsyncClient, upstream: Optional[str] = None, logger=None):
        """Initialize the client.

        Args:
            http: Caller-owned HTTP client
            upstream: Name used in errors and logs; defaults to the class name
            logger: Optional structlog logger
        """
        self.http = http
        self.upstream = upstream or self.upstream
        self.logger = logger or get_logger(self.__class__.__module__)

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            UpstreamTransportError: On network failure or non-2xx status
            UpstreamParseError: If the body is not JSON
        """
        try:
            response = await self.http.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamTransportError(
                f"{self.upstream} request failed: {e.__class__.__name__}: {e}",
                upstream=self.upstream,
            ) from e

        return self._decode(response)

    def _decode(self, response: httpx.Response) -> Any:
        if not response.is_success:
            raise UpstreamTransportError(
                f"{self.upstream} returned HTTP {response.status_code}",
                upstream=self.upstream,
                status=response.status_code,
            )
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise UpstreamParseError(
                f"{self.upstream} returned a non-JSON body: {e}",
                upstream=self.upstream,
            ) from e


class JsonRpcClient(BaseHttpClient):
    """JSON-RPC 2.0 client with exponential backoff on transient failures."""

    upstream = "json-rpc"

    def __init__(
        self,
        http: httpx.AsyncClient,
        rpc_url: str,
        max_retries: int = 2,
        retry_delay: float = 0.5,
        max_retry_delay: float = 8.0,
        upstream: Optional[str] = None,
        logger=None
    ):
        # rpc_url may embed a provider key; errors name the upstream instead
        super().__init__(http, upstream=upstream, logger=logger)
        self.rpc_url = rpc_url
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay
        self._request_id = 0

    def _backoff(self, attempt: int) -> float:
        return min(self.retry_delay * (2 ** attempt), self.max_retry_delay)

    async def _make_request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Make a JSON-RPC request, retrying transient failures.

        Args:
            method: The RPC method to call
            params: The parameters to pass to the method

        Returns:
            The ``result`` member of the JSON-RPC response

        Raises:
            RpcError: If the node returns an error object
            UpstreamTransportError: If the request keeps failing
            UpstreamParseError: If the response is not a JSON-RPC envelope
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }

        for attempt in range(self.max_retries + 1):
            retrying = attempt < self.max_retries
            try:
                response = await self.http.post(self.rpc_url, json=payload)
            except httpx.TransportError as e:
                if retrying:
                    wait_time = self._backoff(attempt)
                    self.logger.warning("rpc_retry", method=method, error=str(e), wait_s=wait_time)
                    await asyncio.sleep(wait_time)
                    continue
                raise UpstreamTransportError(
                    f"RPC {method} failed: {e.__class__.__name__}: {e}",
                    upstream=self.upstream,
                ) from e
            except httpx.HTTPError as e:
                raise UpstreamTransportError(
                    f"RPC {method} failed: {e.__class__.__name__}: {e}",
                    upstream=self.upstream,
                ) from e

            if response.status_code in RETRIABLE_STATUS_CODES and retrying:
                wait_time = self._backoff(attempt)
                self.logger.warning("rpc_retry", method=method, status=response.status_code, wait_s=wait_time)
                await asyncio.sleep(wait_time)
                continue

            body = self._decode(response)
            if not isinstance(body, dict):
                raise UpstreamParseError(f"RPC {method} returned a non-object body", upstream=self.upstream)

            if "error" in body and body["error"] is not None:
                error = body["error"] if isinstance(body["error"], dict) else {"message": str(body["error"])}
                raise RpcError(
                    f"RPC error from {method}: {error.get('message', 'Unknown error')}",
                    upstream=self.upstream,
                    error_data=error,
                )

            if "result" not in body:
                raise UpstreamParseError(f"RPC {method} response has no result", upstream=self.upstream)

            return body["result"]

        # The loop either returns or raises on its last attempt
        raise UpstreamTransportError(f"RPC {method} exhausted retries", upstream=self.upstream)
