"""Base exceptions for hotel-tenancy.

All exceptions inherit from HotelTenancyError and carry an error code,
structured details and an HTTP status mapping for API responses.
"""

from typing import Any, Dict, Optional


class HotelTenancyError(Exception):
    """Base exception for all hotel-tenancy errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception."""
    from .http_mapping import get_http_status_code as _get_status_code
    return _get_status_code(exception)


def create_error_response(exception: HotelTenancyError) -> Dict[str, Any]:
    """Create standardized error response from exception."""
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
