"""Connection manager for the registry and per-tenant databases.

Owns one registry pool and a table of tenant handles keyed by tenant id.
Reads of live handles take no lock; opens are single-flight per key so
concurrent requests for a cold tenant share one pool.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Dict, Optional

import asyncpg

from ....config.settings import HotelTenancySettings, get_settings
from ....core.exceptions import DatabaseUnavailableError
from ....utils.single_flight import SingleFlight
from ....utils.timezone import utc_now
from ...hotel.repositories.models import TenantModels, build_tenant_models
from ...tenants.entities.protocols import TenantRegistry
from ...tenants.entities.tenant import TENANT_ID_PATTERN, normalize_tenant_id
from ...tenants.repositories.tenant_registry_repository import (
    REGISTRY_DATABASE,
    TenantRegistryRepository,
)
from ..entities.connection import ConnectionStats, TenantConnectionHandle
from ..utils.connection_factory import AsyncpgPoolFactory, PoolFactory

logger = logging.getLogger(__name__)

_MAIN_KEY = ("main",)


class ConnectionManager:
    """Lazily opens, caches and closes database pools."""

    def __init__(
        self,
        settings: Optional[HotelTenancySettings] = None,
        pool_factory: Optional[PoolFactory] = None,
        model_builder: Callable[[asyncpg.Pool], TenantModels] = build_tenant_models,
        registry_factory: Callable[..., TenantRegistry] = TenantRegistryRepository,
    ):
        self._settings = settings or get_settings()
        self._pool_factory = pool_factory or AsyncpgPoolFactory(self._settings)
        self._model_builder = model_builder
        self._registry_factory = registry_factory
        self._main_pool: Optional[asyncpg.Pool] = None
        self._main_connected_at: Optional[datetime] = None
        self._registry: Optional[TenantRegistry] = None
        self._handles: Dict[str, TenantConnectionHandle] = {}
        self._flights = SingleFlight()
        # Bumped by close_all; opens started under an older generation are discarded
        self._generation = 0

    async def main_connection(self) -> asyncpg.Pool:
        """Get the registry pool, opening it on first use."""
        pool = self._main_pool
        if pool is not None and not pool.is_closing():
            return pool
        generation = self._generation
        return await self._flights.do(_MAIN_KEY, lambda: self._open_main(generation))

    async def registry(self) -> TenantRegistry:
        """Registry repository bound to the main pool."""
        await self.main_connection()
        return self._registry

    async def tenant_connection(self, tenant_id: str) -> TenantConnectionHandle:
        """Get the live handle for a tenant, opening one if needed.

        Raises:
            DatabaseUnavailableError: the tenant database could not be opened
        """
        tenant_id = normalize_tenant_id(tenant_id)
        if not TENANT_ID_PATTERN.match(tenant_id):
            raise ValueError(f"Invalid tenant identifier '{tenant_id}'")

        handle = self._handles.get(tenant_id)
        if handle is not None:
            if handle.is_live:
                return handle
            logger.warning(f"Discarding dead connection for tenant {tenant_id}")
            self._handles.pop(tenant_id, None)

        generation = self._generation
        return await self._flights.do(
            ("tenant", tenant_id), lambda: self._open_tenant(tenant_id, generation)
        )

    def get_open_connection(self, tenant_id: str) -> Optional[TenantConnectionHandle]:
        """Return a live handle without opening anything."""
        handle = self._handles.get(normalize_tenant_id(tenant_id))
        return handle if handle is not None and handle.is_live else None

    async def _open_main(self, generation: int) -> asyncpg.Pool:
        pool = await self._open_pool(self._settings.registry_database_url, None, REGISTRY_DATABASE)
        await self._discard_if_closed(pool, generation, REGISTRY_DATABASE)
        self._main_pool = pool
        self._main_connected_at = utc_now()
        self._registry = self._registry_factory(
            pool, default_timezone=self._settings.default_hotel_timezone
        )
        logger.info("Connected to registry database")
        return pool

    async def _open_tenant(self, tenant_id: str, generation: int) -> TenantConnectionHandle:
        database_name = self._settings.tenant_database_name(tenant_id)
        pool = await self._open_pool(self._settings.tenant_database_url, database_name, database_name)
        await self._discard_if_closed(pool, generation, database_name)

        try:
            models = self._model_builder(pool)
        except Exception as e:
            logger.error(f"Failed to register models for {database_name}: {e}")
            await pool.close()
            raise DatabaseUnavailableError(database_name, f"model registration failed: {e}") from e

        handle = TenantConnectionHandle(
            tenant_id=tenant_id,
            database_name=database_name,
            pool=pool,
            models=models,
            opened_at=utc_now(),
        )
        self._handles[tenant_id] = handle
        logger.info(f"Opened tenant database {database_name}")
        return handle

    async def _open_pool(self, dsn: str, database: Optional[str], label: str) -> asyncpg.Pool:
        try:
            return await self._pool_factory(dsn, database)
        except DatabaseUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Failed to open database {label}: {e}")
            raise DatabaseUnavailableError(label, str(e)) from e

    async def _discard_if_closed(self, pool: asyncpg.Pool, generation: int, label: str) -> None:
        """Close a pool whose open outlived a close_all() and fail the open."""
        if generation == self._generation:
            return
        await pool.close()
        logger.info(f"Closed database {label} opened during shutdown")
        raise DatabaseUnavailableError(label, "connections were closed while opening")

    async def close_tenant_connection(self, tenant_id: str) -> bool:
        """Close one tenant's pool. Returns False when none was open."""
        handle = self._handles.pop(normalize_tenant_id(tenant_id), None)
        if handle is None:
            return False
        await handle.pool.close()
        logger.info(f"Closed tenant database {handle.database_name}")
        return True

    async def close_all(self) -> None:
        """Close every pool, tenants and registry alike.

        Opens still in flight finish by closing their own pool and raising
        ``DatabaseUnavailableError``; none of them is stored.
        """
        self._generation += 1
        handles = list(self._handles.values())
        self._handles.clear()
        main_pool, self._main_pool = self._main_pool, None
        self._registry = None
        self._main_connected_at = None

        pools = [handle.pool for handle in handles]
        names = [handle.database_name for handle in handles]
        if main_pool is not None:
            pools.append(main_pool)
            names.append(REGISTRY_DATABASE)

        results = await asyncio.gather(*(pool.close() for pool in pools), return_exceptions=True)
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.error(f"Error closing database {name}: {result}")

        logger.info(f"Closed {len(pools)} database pool(s)")

    def stats(self) -> ConnectionStats:
        """Current connection snapshot."""
        main_pool = self._main_pool
        return ConnectionStats(
            main_connected=main_pool is not None and not main_pool.is_closing(),
            main_connected_at=self._main_connected_at,
            tenant_connections=[h for h in self._handles.values() if h.is_live],
            opening=len(self._flights),
        )
