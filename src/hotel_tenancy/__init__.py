"""hotel-tenancy - multi-tenant hotel billing core.

Resolves hotels from request hosts, manages one database pool per hotel,
and keeps every in-house guest's bill in line with the hotel's check-in
and check-out policy through a background reconciliation scheduler.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__
from .config import HotelTenancySettings, get_settings
from .core.exceptions import (
    DatabaseUnavailableError,
    HotelTenancyError,
    InvariantViolationError,
    MainDomainError,
    PartialReconciliationError,
    TenantNotFoundError,
    TenantUnavailableError,
)
from .features.billing import BillingReconciler, ChargeBreakdown, compute_charges
from .features.database import ConnectionManager, TenantConnectionHandle
from .features.scheduler import JobMonitor, PassReport, PeriodicTask, ReconciliationScheduler
from .features.tenants import BillingPolicy, TenantRecord, resolve_tenant_id
from .features.tenants.services import DirectoryCache, TenantContext, TenantDirectory

__all__ = [
    "__version__",

    # Configuration
    "HotelTenancySettings",
    "get_settings",

    # Exceptions
    "HotelTenancyError",
    "TenantNotFoundError",
    "TenantUnavailableError",
    "MainDomainError",
    "DatabaseUnavailableError",
    "InvariantViolationError",
    "PartialReconciliationError",

    # Tenants
    "BillingPolicy",
    "TenantRecord",
    "resolve_tenant_id",
    "DirectoryCache",
    "TenantContext",
    "TenantDirectory",

    # Database
    "ConnectionManager",
    "TenantConnectionHandle",

    # Billing
    "BillingReconciler",
    "ChargeBreakdown",
    "compute_charges",

    # Scheduler
    "JobMonitor",
    "PassReport",
    "PeriodicTask",
    "ReconciliationScheduler",
]
