"""
Inscription content relay.

Serves inscription bytes from the content host under this server's origin so
browsers can render them without cross-origin restrictions.
"""

import re

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from chainfolio.clients.base_client import ClientFactory
from chainfolio.config import RelayConfig
from chainfolio.dependencies import get_relay_client_factory, get_relay_settings
from chainfolio.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["content"])

# <64 hex txid>i<output index>
INSCRIPTION_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{64}i\d+$")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def not_found(inscription_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "Content not found", "id": inscription_id},
    )


@router.get("/content/{inscription_id}")
async def relay_content(
    inscription_id: str,
    relay: RelayConfig = Depends(get_relay_settings),
    client_factory: ClientFactory = Depends(get_relay_client_factory),
):
    """
    Relay the raw content of an inscription.

    The upstream body is returned verbatim with its content type. Any upstream
    failure is reported as 404; there is no retry and no fallback host.
    """
    if not INSCRIPTION_ID_PATTERN.match(inscription_id):
        logger.info("relay_rejected_id", inscription_id=inscription_id)
        return not_found(inscription_id)

    try:
        async with client_factory() as http:
            upstream = await http.get(relay.upstream_url(inscription_id), timeout=relay.timeout)
    except httpx.HTTPError as e:
        logger.warning("relay_upstream_error", inscription_id=inscription_id, error=str(e))
        return not_found(inscription_id)

    if not upstream.is_success:
        logger.warning("relay_upstream_status", inscription_id=inscription_id, status=upstream.status_code)
        return not_found(inscription_id)

    logger.debug("relay_served", inscription_id=inscription_id, size=len(upstream.content))
    return Response(
        content=upstream.content,
        headers={
            "Content-Type": upstream.headers.get("content-type", DEFAULT_CONTENT_TYPE),
            "Cache-Control": f"public, max-age={relay.cache_seconds}",
            "Access-Control-Allow-Origin": "*",
        },
    )
