"""Tenant repositories."""

from .tenant_registry_repository import TenantRegistryRepository

__all__ = ["TenantRegistryRepository"]
