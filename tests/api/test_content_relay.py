"""Tests for the inscription content relay route."""

import httpx
import pytest
from fastapi.testclient import TestClient

from chainfolio.dependencies import get_relay_client_factory, get_relay_settings
from chainfolio.main import app
from tests.fixtures.common import INSCRIPTION_ID, RecordingFactory, unreachable

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def relay_client(relay_config):
    """Build a TestClient whose relay upstream answers from ``handler``."""
    def build(handler):
        factory = RecordingFactory(handler)
        app.dependency_overrides[get_relay_settings] = lambda: relay_config
        app.dependency_overrides[get_relay_client_factory] = lambda: factory
        return TestClient(app), factory

    yield build
    app.dependency_overrides.clear()


def test_serves_upstream_bytes(relay_client):
    client, factory = relay_client(
        lambda request: httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})
    )

    response = client.get(f"/content/{INSCRIPTION_ID}")

    assert response.status_code == 200
    assert response.content == PNG_BYTES
    assert response.headers["content-type"] == "image/png"
    assert response.headers["cache-control"] == "public, max-age=86400"
    assert response.headers["access-control-allow-origin"] == "*"
    assert str(factory.requests[0].url) == f"https://ordinals.test/content/{INSCRIPTION_ID}"


def test_text_content_type_is_passed_through_verbatim(relay_client):
    client, _ = relay_client(
        lambda request: httpx.Response(200, content=b"hello", headers={"content-type": "text/plain"})
    )

    response = client.get(f"/content/{INSCRIPTION_ID}")

    assert response.headers["content-type"] == "text/plain"
    assert response.text == "hello"


def test_missing_content_type_defaults_to_octet_stream(relay_client):
    client, _ = relay_client(lambda request: httpx.Response(200, content=b"raw"))

    response = client.get(f"/content/{INSCRIPTION_ID}")

    assert response.headers["content-type"] == "application/octet-stream"


@pytest.mark.parametrize("status", [404, 500, 503])
def test_upstream_error_is_404(relay_client, status):
    client, _ = relay_client(lambda request: httpx.Response(status))

    response = client.get(f"/content/{INSCRIPTION_ID}")

    assert response.status_code == 404
    assert response.json() == {"error": "Content not found", "id": INSCRIPTION_ID}


def test_upstream_timeout_is_404(relay_client):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client, _ = relay_client(handler)

    response = client.get(f"/content/{INSCRIPTION_ID}")

    assert response.status_code == 404
    assert response.json()["id"] == INSCRIPTION_ID


def test_malformed_id_is_404_without_upstream_call(relay_client):
    client, factory = relay_client(unreachable)

    response = client.get("/content/not-an-inscription")

    assert response.status_code == 404
    assert response.json() == {"error": "Content not found", "id": "not-an-inscription"}
    assert factory.requests == []
