"""Tenant utilities."""

from .resolver import LOOPBACK_ALIASES, NON_TENANT_ALIASES, extract_subdomain, resolve_tenant_id

__all__ = [
    "LOOPBACK_ALIASES",
    "NON_TENANT_ALIASES",
    "extract_subdomain",
    "resolve_tenant_id",
]
