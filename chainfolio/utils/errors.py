"""
Error types for Chainfolio.

Clients raise these; services turn them into failed outcomes and the API
layer turns them into HTTP responses.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes for the Chainfolio API."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    CAPABILITY_UNAVAILABLE = "CAPABILITY_UNAVAILABLE"
    CHAIN_NOT_FOUND = "CHAIN_NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    RPC_ERROR = "RPC_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response model."""

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ChainfolioError(Exception):
    """Base exception for all Chainfolio errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize a new Chainfolio error.

        Args:
            message: Error message
            code: Error code
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the error to a dictionary.

        Returns:
            Dictionary representation of the error
        """
        return ErrorResponse(
            code=self.code.value,
            message=self.message,
            details=self.details or None,
        ).model_dump()


class AddressValidationError(ChainfolioError):
    """Malformed address, rejected before any network call."""

    def __init__(self, address: str, chain: Optional[str] = None):
        label = f"{chain} address" if chain else "address"
        super().__init__(
            message=f"Invalid {label}: {address}",
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details={"address": address, "chain": chain}
        )


class UpstreamTransportError(ChainfolioError):
    """Non-success HTTP status or network failure calling an upstream."""

    def __init__(
        self,
        message: str,
        upstream: str,
        status: Optional[int] = None
    ):
        super().__init__(
            message=message,
            code=ErrorCode.TRANSPORT_ERROR,
            status_code=502,
            details={"upstream": upstream, "status": status}
        )
        self.upstream = upstream
        self.status = status


class UpstreamParseError(ChainfolioError):
    """Malformed or unexpected upstream payload."""

    def __init__(self, message: str, upstream: str):
        super().__init__(
            message=message,
            code=ErrorCode.PARSE_ERROR,
            status_code=502,
            details={"upstream": upstream}
        )
        self.upstream = upstream


class RpcError(UpstreamTransportError):
    """JSON-RPC node answered with an error object."""

    def __init__(self, message: str, upstream: str, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, upstream=upstream)
        self.code = ErrorCode.RPC_ERROR
        self.error_data = error_data or {}


class CapabilityUnavailableError(ChainfolioError):
    """A feature whose precondition (API key, chain feature) is unmet.

    Services report this as an empty successful result, never as a failure.
    """

    def __init__(self, capability: str, reason: str):
        super().__init__(
            message=f"{capability} unavailable: {reason}",
            code=ErrorCode.CAPABILITY_UNAVAILABLE,
            status_code=200,
            details={"capability": capability, "reason": reason}
        )
        self.capability = capability


class ChainNotFoundError(ChainfolioError):
    def __init__(self, chain: str):
        super().__init__(
            message=f"Unknown chain: {chain}",
            code=ErrorCode.CHAIN_NOT_FOUND,
            status_code=404,
            details={"chain": chain}
        )


class ConfigurationError(ChainfolioError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=ErrorCode.CONFIGURATION_ERROR,
            status_code=500,
            details=details
        )
