"""Room repository bound to one tenant pool."""

import logging
from typing import Any, Optional

import asyncpg

from ....config.constants import TenantTables
from ..entities.room import Room

logger = logging.getLogger(__name__)


class RoomRepository:
    """Read access to a tenant's rooms."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool
        self._table = TenantTables.ROOMS

    async def get(self, room_id: Any) -> Optional[Room]:
        """Get a room by id."""
        row = await self._pool.fetchrow(
            f"SELECT id, number, room_type, price FROM {self._table} WHERE id = $1",
            room_id,
        )
        return Room.from_row(row) if row else None
