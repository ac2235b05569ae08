"""Exception hierarchy for hotel-tenancy."""

from .base import HotelTenancyError, create_error_response, get_http_status_code
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

__all__ = [
    # Base
    "HotelTenancyError",
    "get_http_status_code",
    "create_error_response",

    # Configuration
    "ConfigurationError",

    # Tenants
    "TenantError",
    "TenantNotFoundError",
    "TenantUnavailableError",
    "MainDomainError",

    # Database
    "DatabaseError",
    "DatabaseUnavailableError",
    "EntityNotFoundError",

    # Billing
    "BillingError",
    "InvariantViolationError",
    "PartialReconciliationError",
]
