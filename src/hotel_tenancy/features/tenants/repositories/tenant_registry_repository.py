"""Registry repository for hotel tenants.

Reads the ``hotels`` table of the registry database. Provisioning owns the
table; this service only ever reads it.
"""

import asyncio
import logging
from typing import Any, List, Mapping, Optional

import asyncpg

from ....config.constants import RegistryTables, TenantStatus
from ....core.exceptions import DatabaseUnavailableError
from ..entities.tenant import BillingPolicy, TenantRecord, normalize_tenant_id

logger = logging.getLogger(__name__)

REGISTRY_DATABASE = "registry"


class TenantRegistryRepository:
    """Read-only queries against the registry.

    Connection-level failures surface as ``DatabaseUnavailableError`` so
    callers can tell "no such hotel" from "could not ask".
    """

    def __init__(self, pool: asyncpg.Pool, default_timezone: str = "UTC"):
        self._pool = pool
        self._table = RegistryTables.HOTELS
        self._default_timezone = default_timezone

    async def find_active_tenant(self, identifier: str) -> Optional[TenantRecord]:
        """Find an active hotel by subdomain."""
        subdomain = normalize_tenant_id(identifier)
        try:
            row = await self._pool.fetchrow(
                f"""
                    SELECT id, subdomain, name, status, standard_checkin_time,
                           standard_checkout_time, early_checkin_policy,
                           late_checkout_policy, timezone
                    FROM {self._table}
                    WHERE subdomain = $1 AND status = $2
                """,
                subdomain,
                TenantStatus.ACTIVE.value,
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Registry lookup failed for hotel {subdomain}: {e}")
            raise DatabaseUnavailableError(REGISTRY_DATABASE, str(e)) from e

        if not row:
            logger.debug(f"No active hotel for subdomain {subdomain}")
            return None
        try:
            return self._map_row(row)
        except ValueError as e:
            # Served like an unknown hotel until provisioning fixes the record
            logger.warning(f"Invalid hotel record {subdomain!r}: {e}")
            return None

    async def list_active_tenants(self) -> List[TenantRecord]:
        """List every active hotel ordered by subdomain."""
        try:
            rows = await self._pool.fetch(
                f"""
                    SELECT id, subdomain, name, status, standard_checkin_time,
                           standard_checkout_time, early_checkin_policy,
                           late_checkout_policy, timezone
                    FROM {self._table}
                    WHERE status = $1
                    ORDER BY subdomain
                """,
                TenantStatus.ACTIVE.value,
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to list active hotels: {e}")
            raise DatabaseUnavailableError(REGISTRY_DATABASE, str(e)) from e

        tenants = []
        for row in rows:
            try:
                tenants.append(self._map_row(row))
            except ValueError as e:
                # Skip rows provisioning left malformed; the rest are still served
                logger.warning(f"Skipping invalid hotel record {row['subdomain']!r}: {e}")
        return tenants

    def _map_row(self, row: Mapping[str, Any]) -> TenantRecord:
        policy = BillingPolicy(
            standard_check_in_hour=_hour(row.get("standard_checkin_time"), 14),
            standard_check_out_hour=_hour(row.get("standard_checkout_time"), 12),
            early_check_in_policy=row.get("early_checkin_policy") or "free",
            late_check_out_policy=row.get("late_checkout_policy") or "free",
            timezone=row.get("timezone") or self._default_timezone,
        )
        return TenantRecord(
            id=row.get("id"),
            tenant_id=row["subdomain"],
            name=row["name"],
            status=row["status"],
            policy=policy,
        )


def _hour(value: Any, default: int) -> int:
    """Registry hours are stored as integers or ``time`` values."""
    if value is None:
        return default
    if hasattr(value, "hour"):
        return value.hour
    return int(value)
