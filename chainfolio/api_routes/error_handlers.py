"""
Error handlers for the API
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chainfolio.logging_config import get_logger
from chainfolio.utils.errors import ChainfolioError, ErrorCode, ErrorResponse

logger = get_logger("chainfolio.api.errors")


def register_error_handlers(app: FastAPI) -> None:
    """Register global error handlers for the application"""

    @app.exception_handler(ChainfolioError)
    async def chainfolio_error_handler(request: Request, exc: ChainfolioError):
        """Handle domain errors raised by routes"""
        logger.warning(
            "request_failed",
            error_code=exc.code.value,
            error=exc.message,
            status_code=exc.status_code,
            path=request.url.path
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies and parameters"""
        logger.info("request_invalid", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                code=ErrorCode.VALIDATION_ERROR.value,
                message="Invalid request",
                details={"errors": [error.get("msg") for error in exc.errors()]},
            ).model_dump()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions"""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all uncaught exceptions"""
        logger.exception(
            "uncaught_exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if app.debug else "An unexpected error occurred"
            }
        )
