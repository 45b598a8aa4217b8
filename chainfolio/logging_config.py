"""Logging configuration for the Chainfolio server."""

import logging
import sys
import time
import uuid
from typing import Optional

import structlog


def configure_logging(log_level: str = "INFO", json_logs: Optional[bool] = None) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: The log level to use (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of the console format. Defaults to
            JSON outside of development.
    """
    log_level_value = getattr(logging, log_level.upper(), logging.INFO)

    if json_logs is None:
        from chainfolio.config import get_server_config
        json_logs = get_server_config().environment != "development"

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level_value,
    )

    # Set third-party loggers to a higher level to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)

    structlog.get_logger("chainfolio").info("logging_configured", log_level=log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger with the specified name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


class RequestIdMiddleware:
    """ASGI middleware that tags every request with a request ID.

    The ID is bound into structlog's context variables so every log line
    emitted while serving the request carries it, and is echoed back in the
    ``X-Request-ID`` response header.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("chainfolio.middleware")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        path = scope.get("path", "unknown")
        method = scope.get("method", "unknown")

        structlog.contextvars.bind_contextvars(request_id=request_id)
        self.logger.info("request_received", method=method, path=path)
        start_time = time.perf_counter()

        async def wrapped_send(message):
            if message["type"] == "http.response.start":
                duration_ms = (time.perf_counter() - start_time) * 1000
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message["headers"] = headers
                self.logger.info(
                    "response_sent",
                    method=method,
                    path=path,
                    status=message.get("status", 0),
                    duration_ms=round(duration_ms, 2),
                )
            await send(message)

        try:
            await self.app(scope, receive, wrapped_send)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
