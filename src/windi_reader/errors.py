"""
Error codes and exception types for windi-reader.

The verification engine itself never raises for expected failures; it
reports them as strings on VerificationResult. These exceptions cover
the remote client: bad configuration and transport/HTTP failures.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes carried by WindiError.code."""
    WINDI_ERROR = "WINDI_ERROR"
    WINDI_HTTP_ERROR = "WINDI_HTTP_ERROR"
    WINDI_CONFIG_ERROR = "WINDI_CONFIG_ERROR"


class WindiError(Exception):
    """Base class for windi-reader errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.WINDI_ERROR,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class WindiConfigError(WindiError):
    """Missing or invalid client configuration. Raised at construction."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, ErrorCode.WINDI_CONFIG_ERROR, details)


class WindiHttpError(WindiError):
    """
    HTTP or network failure talking to the verification API.

    status is 0 when no response was received.
    """

    def __init__(
        self,
        message: str,
        status: int = 0,
        data: Any = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.WINDI_HTTP_ERROR,
            {"status": status, "data": data, "request_id": request_id},
        )
        self.status = status
        self.data = data
        self.request_id = request_id
