"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import HotelTenancyError
from .domain import (
    BillingError,
    ConfigurationError,
    DatabaseError,
    DatabaseUnavailableError,
    EntityNotFoundError,
    InvariantViolationError,
    MainDomainError,
    PartialReconciliationError,
    TenantError,
    TenantNotFoundError,
    TenantUnavailableError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 403 Forbidden
    MainDomainError: 403,

    # 404 Not Found
    TenantNotFoundError: 404,
    EntityNotFoundError: 404,

    # 409 Conflict
    InvariantViolationError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,
    TenantError: 500,
    DatabaseError: 500,
    BillingError: 500,
    PartialReconciliationError: 500,

    # 503 Service Unavailable
    TenantUnavailableError: 503,
    DatabaseUnavailableError: 503,

    # Default
    HotelTenancyError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception, walking its class hierarchy."""
    for klass in type(exception).__mro__:
        if klass in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[klass]
    return 500
