"""Domain exceptions for hotel-tenancy."""

from typing import Any, Dict, Optional

from .base import HotelTenancyError


# Configuration Errors
class ConfigurationError(HotelTenancyError):
    """Raised when there's a configuration issue."""
    pass


# Tenant Errors
class TenantError(HotelTenancyError):
    """Base class for tenant-related errors."""
    pass


class TenantNotFoundError(TenantError):
    """Raised when a hotel is absent from the registry or not active.

    Definitive: callers should not retry.
    """

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(
            f"Hotel '{tenant_id}' not found or inactive",
            error_code="HOTEL_NOT_FOUND",
            details={"tenant_id": tenant_id},
        )


class TenantUnavailableError(TenantError):
    """Raised when the registry or a tenant database cannot be reached.

    Transient: safe to retry with backoff.
    """

    def __init__(self, tenant_id: Optional[str], reason: str = ""):
        self.tenant_id = tenant_id
        self.reason = reason
        message = "Hotel database temporarily unavailable"
        if tenant_id:
            message = f"Hotel database for '{tenant_id}' temporarily unavailable"
        super().__init__(
            message,
            error_code="DATABASE_UNAVAILABLE",
            details={"tenant_id": tenant_id, "reason": reason},
        )


class MainDomainError(TenantError):
    """Raised when a tenant-only route is called on the main domain."""

    def __init__(self):
        super().__init__(
            "This route requires a valid hotel subdomain",
            error_code="TENANT_REQUIRED",
        )


# Database Errors
class DatabaseError(HotelTenancyError):
    """Base class for database-related errors."""
    pass


class DatabaseUnavailableError(DatabaseError):
    """Raised when a database connection cannot be opened."""

    def __init__(self, database_name: str, reason: str = ""):
        self.database_name = database_name
        self.reason = reason
        message = f"Database '{database_name}' is unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            error_code="DATABASE_UNAVAILABLE",
            details={"database": database_name, "reason": reason},
        )


# Entity Errors
class EntityNotFoundError(HotelTenancyError):
    """Raised when an entity is not found in a repository."""

    def __init__(self, entity_type: str, identifier: Any):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(
            f"{entity_type} with identifier '{identifier}' not found",
            details={"entity_type": entity_type, "identifier": str(identifier)},
        )


# Billing Errors
class BillingError(HotelTenancyError):
    """Base class for billing errors."""
    pass


class InvariantViolationError(BillingError):
    """Raised when a stay cannot be reconciled because related data is missing.

    Recorded per stay; a later pass recovers once the owning collaborator
    creates the missing entity.
    """

    def __init__(self, message: str, stay_id: Any = None, details: Optional[Dict[str, Any]] = None):
        self.stay_id = stay_id
        merged = {"stay_id": str(stay_id) if stay_id is not None else None}
        merged.update(details or {})
        super().__init__(message, details=merged)


class PartialReconciliationError(BillingError):
    """A reconciliation pass in which some stays or tenants failed.

    Logged with counts; never raised out of a scheduled pass.
    """

    def __init__(self, task_name: str, tenant_errors: int, stay_errors: int,
                 details: Optional[Dict[str, Any]] = None):
        self.task_name = task_name
        self.tenant_errors = tenant_errors
        self.stay_errors = stay_errors
        merged = {"task": task_name, "tenant_errors": tenant_errors, "stay_errors": stay_errors}
        merged.update(details or {})
        super().__init__(
            f"Reconciliation pass '{task_name}' completed with "
            f"{tenant_errors} tenant error(s) and {stay_errors} stay error(s)",
            details=merged,
        )
