"""Tenant entities and protocols."""

from .protocols import TenantRegistry
from .tenant import BillingPolicy, TenantRecord, normalize_tenant_id

__all__ = [
    "BillingPolicy",
    "TenantRecord",
    "TenantRegistry",
    "normalize_tenant_id",
]
