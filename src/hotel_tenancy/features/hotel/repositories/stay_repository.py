"""Stay repository bound to one tenant pool."""

import logging
from datetime import datetime
from typing import Any, List, Optional

import asyncpg

from ....config.constants import StayStatus, TenantTables
from ..entities.stay import Stay

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, room_id, guest_name, check_in_date, actual_check_in_date, "
    "check_out_date, actual_check_out_date, status"
)


class StayRepository:
    """Read access to a tenant's stays."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool
        self._table = TenantTables.STAYS

    async def get(self, stay_id: Any) -> Optional[Stay]:
        """Get a stay by id."""
        row = await self._pool.fetchrow(
            f"SELECT {_COLUMNS} FROM {self._table} WHERE id = $1", stay_id
        )
        return Stay.from_row(row) if row else None

    async def list_checked_in(self) -> List[Stay]:
        """All stays currently in house."""
        rows = await self._pool.fetch(
            f"SELECT {_COLUMNS} FROM {self._table} WHERE status = $1 ORDER BY check_in_date",
            StayStatus.CHECKED_IN.value,
        )
        return [Stay.from_row(row) for row in rows]

    async def list_overdue(self, now: datetime) -> List[Stay]:
        """In-house stays whose expected check-out has passed."""
        rows = await self._pool.fetch(
            f"""
                SELECT {_COLUMNS} FROM {self._table}
                WHERE status = $1 AND check_out_date < $2
                ORDER BY check_out_date
            """,
            StayStatus.CHECKED_IN.value,
            now,
        )
        return [Stay.from_row(row) for row in rows]

    async def count_checked_in(self) -> int:
        """Number of guests in house."""
        value = await self._pool.fetchval(
            f"SELECT count(*) FROM {self._table} WHERE status = $1",
            StayStatus.CHECKED_IN.value,
        )
        return int(value or 0)
