"""Hotel feature: per-tenant rooms, stays and bills.

- entities/: Room, Stay, Bill and BillItem domain objects
- repositories/: asyncpg repositories bound to one tenant pool, bundled
  per tenant by ``build_tenant_models``
"""

from .entities import Bill, BillItem, Room, Stay
from .repositories import BillRepository, RoomRepository, StayRepository, TenantModels, build_tenant_models

__all__ = [
    "Bill",
    "BillItem",
    "Room",
    "Stay",
    "BillRepository",
    "RoomRepository",
    "StayRepository",
    "TenantModels",
    "build_tenant_models",
]
