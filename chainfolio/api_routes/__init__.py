"""HTTP API routers."""

from chainfolio.api_routes.assets import router as assets_router
from chainfolio.api_routes.content import router as content_router
from chainfolio.api_routes.error_handlers import register_error_handlers

__all__ = ["assets_router", "content_router", "register_error_handlers"]
