"""Database entities."""

from .connection import ConnectionStats, TenantConnectionHandle

__all__ = ["ConnectionStats", "TenantConnectionHandle"]
