"""Tenant routing dependencies."""

from .dependencies import get_tenant_context, get_tenant_directory

__all__ = ["get_tenant_context", "get_tenant_directory"]
