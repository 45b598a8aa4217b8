"""Common test fixtures for Chainfolio tests.

Upstream APIs are faked with ``httpx.MockTransport``; every request made
through a fake client factory is recorded so tests can assert on it.
"""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from chainfolio.config import ApiKeys, FetchConfig, RelayConfig, build_chain_registry

EVM_ADDRESS = "0x" + "ab" * 20
TAPROOT_ADDRESS = "bc1p" + "q" * 58
SEGWIT_ADDRESS = "bc1q" + "a" * 38
LEGACY_ADDRESS = "1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2"

INSCRIPTION_ID = "6fb976ab49dcec017f1e201e84395983204ae1a7c2abf7ced0a85d692e442799i0"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingFactory:
    """Client factory whose clients answer from ``handler`` and record requests."""

    def __init__(self, handler: Handler):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def __call__(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handle))


def rpc_body(request: httpx.Request) -> Dict[str, Any]:
    return json.loads(request.content)


def rpc_result(request: httpx.Request, result: Any) -> httpx.Response:
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": rpc_body(request)["id"], "result": result})


def unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.fixture
def recording_factory():
    """Build a RecordingFactory from a request handler."""
    return RecordingFactory


@pytest.fixture
def no_keys():
    return ApiKeys(alchemy=None)


@pytest.fixture
def alchemy_keys():
    return ApiKeys(alchemy="test-key")


@pytest.fixture
def registry(no_keys):
    return build_chain_registry(no_keys)


@pytest.fixture
def fetch_config():
    """Fetch settings without retry delays."""
    return FetchConfig(request_timeout=5.0, rpc_max_retries=0, rpc_retry_delay=0.0, token_scan_concurrency=2)


@pytest.fixture
def relay_config():
    return RelayConfig(content_host="https://ordinals.test", timeout=10.0, cache_seconds=86400, public_base="")
