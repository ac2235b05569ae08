"""Tenant services."""

from .directory_cache import DirectoryCache, DirectoryCacheEntry
from .tenant_directory import TenantContext, TenantDirectory

__all__ = [
    "DirectoryCache",
    "DirectoryCacheEntry",
    "TenantContext",
    "TenantDirectory",
]
