"""Main entry point for the Chainfolio server."""

import argparse
import sys
from dataclasses import replace

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chainfolio import __version__
from chainfolio.api_routes import assets_router, content_router, register_error_handlers
from chainfolio.config import get_chain_registry, get_server_config
from chainfolio.logging_config import RequestIdMiddleware, configure_logging, get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        The configured FastAPI application
    """
    config = get_server_config()
    configure_logging(config.log_level)

    app = FastAPI(
        title="Chainfolio",
        description="Multi-chain wallet asset discovery for EVM chains and Bitcoin Ordinals",
        version=__version__,
        debug=config.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)

    app.include_router(assets_router)
    app.include_router(content_router)

    @app.get("/health", tags=["system"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/version", tags=["system"])
    async def version():
        """Get API version information."""
        return {
            "version": __version__,
            "name": "Chainfolio",
            "chains": list(get_chain_registry()),
        }

    return app


app = create_app()


def run_server(port=None):
    """Run the server from command line.

    Args:
        port: Optional port override

    This function is used as an entry point in setup.py.
    """
    config = get_server_config()

    if port is not None:
        try:
            config = replace(config, port=int(port))
        except ValueError:
            logger.error("invalid_port", port=port)
            sys.exit(1)

    logger.info(
        "server_starting",
        host=config.host,
        port=config.port,
        environment=config.environment,
    )

    uvicorn.run(
        "chainfolio.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Chainfolio server")
    parser.add_argument("--port", type=int, help="Server port")
    args = parser.parse_args()

    run_server(port=args.port)
