"""Per-tenant repository bundle.

Each tenant connection gets its own statically typed set of repositories,
built once when the connection opens.
"""

from dataclasses import dataclass

import asyncpg

from .bill_repository import BillRepository
from .room_repository import RoomRepository
from .stay_repository import StayRepository


@dataclass(frozen=True)
class TenantModels:
    """Repositories scoped to one tenant database."""

    rooms: RoomRepository
    stays: StayRepository
    bills: BillRepository


def build_tenant_models(pool: asyncpg.Pool) -> TenantModels:
    """Bind the standard repositories to a tenant pool."""
    return TenantModels(
        rooms=RoomRepository(pool),
        stays=StayRepository(pool),
        bills=BillRepository(pool),
    )
