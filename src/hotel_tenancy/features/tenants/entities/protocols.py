"""Tenant protocols."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .tenant import TenantRecord


@runtime_checkable
class TenantRegistry(Protocol):
    """Read-only registry queries served from the main connection."""

    @abstractmethod
    async def find_active_tenant(self, identifier: str) -> Optional[TenantRecord]:
        """Find an active hotel by subdomain."""
        ...

    @abstractmethod
    async def list_active_tenants(self) -> List[TenantRecord]:
        """List every active hotel."""
        ...
