"""Tenant directory: tenant id -> (hotel record, database handle).

A cache hit returns without I/O. A miss asks the registry for an active
hotel and only then opens the tenant database, so unknown subdomains
never cost a connection. Misses are single-flight per tenant id.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ....config.settings import HotelTenancySettings, get_settings
from ....core.exceptions import (
    DatabaseUnavailableError,
    TenantNotFoundError,
    TenantUnavailableError,
)
from ....utils.single_flight import SingleFlight
from ...database.entities.connection import TenantConnectionHandle
from ...database.repositories.connection_manager import ConnectionManager
from ...hotel.repositories.models import TenantModels
from ..entities.tenant import TENANT_ID_PATTERN, TenantRecord, normalize_tenant_id
from ..utils.resolver import resolve_tenant_id
from .directory_cache import DirectoryCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """A resolved hotel and its open database."""

    tenant: TenantRecord
    handle: TenantConnectionHandle

    @property
    def tenant_id(self) -> str:
        return self.tenant.tenant_id

    @property
    def models(self) -> TenantModels:
        return self.handle.models


class TenantDirectory:
    """Resolves tenant ids to contexts through a TTL cache."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        cache: Optional[DirectoryCache] = None,
        settings: Optional[HotelTenancySettings] = None,
    ):
        settings = settings or get_settings()
        self._connections = connection_manager
        self._cache = cache or DirectoryCache(ttl_seconds=settings.directory_cache_ttl_seconds)
        self._flights = SingleFlight()

    async def resolve(self, tenant_id: str) -> TenantContext:
        """Resolve a tenant id.

        Raises:
            TenantNotFoundError: no active hotel with this id
            TenantUnavailableError: the registry or tenant database is unreachable
        """
        key = normalize_tenant_id(tenant_id)
        context = self._cache.get(key)
        if context is not None:
            if context.handle.is_live:
                return context
            self._cache.invalidate(key)

        return await self._flights.do(key, lambda: self._load(key))

    async def resolve_request(
        self,
        host: Any,
        forwarded_host: Any = None,
        override: Any = None,
    ) -> Optional[TenantContext]:
        """Resolve the tenant for request headers; None for the main domain."""
        tenant_id = resolve_tenant_id(host, forwarded_host=forwarded_host, override=override)
        if tenant_id is None:
            return None
        return await self.resolve(tenant_id)

    async def _load(self, key: str) -> TenantContext:
        if not TENANT_ID_PATTERN.match(key):
            raise TenantNotFoundError(key)

        try:
            registry = await self._connections.registry()
            tenant = await registry.find_active_tenant(key)
        except DatabaseUnavailableError as e:
            raise TenantUnavailableError(key, reason=e.reason or e.message) from e

        if tenant is None or not tenant.is_active:
            logger.info(f"Hotel {key} not found or inactive")
            raise TenantNotFoundError(key)

        try:
            handle = await self._connections.tenant_connection(key)
        except DatabaseUnavailableError as e:
            raise TenantUnavailableError(key, reason=e.reason or e.message) from e

        context = TenantContext(tenant=tenant, handle=handle)
        self._cache.put(key, context)
        logger.debug(f"Cached directory entry for hotel {key}")
        return context

    def invalidate(self, tenant_id: str) -> bool:
        """Drop one cached hotel; the open connection is kept."""
        removed = self._cache.invalidate(normalize_tenant_id(tenant_id))
        if removed:
            logger.info(f"Cleared directory cache for hotel {tenant_id}")
        return removed

    def clear(self) -> int:
        """Drop every cached hotel."""
        count = self._cache.clear()
        logger.info(f"Cleared {count} directory cache entries")
        return count

    def cache_stats(self) -> Dict[str, Any]:
        stats = self._cache.stats()
        stats["resolving"] = len(self._flights)
        return stats
