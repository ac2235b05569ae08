"""Tenants feature: hotel identification and registry access.

- entities/: TenantRecord, BillingPolicy, registry protocol
- utils/: request-header tenant resolver
- repositories/: registry queries
- services/: directory cache and tenant directory (import from
  ``hotel_tenancy.features.tenants.services``)
- routers/: FastAPI dependencies
"""

from .entities import BillingPolicy, TenantRecord, TenantRegistry, normalize_tenant_id
from .repositories import TenantRegistryRepository
from .utils import extract_subdomain, resolve_tenant_id

__all__ = [
    "BillingPolicy",
    "TenantRecord",
    "TenantRegistry",
    "TenantRegistryRepository",
    "extract_subdomain",
    "normalize_tenant_id",
    "resolve_tenant_id",
]
