"""Hotel repositories."""

from .bill_repository import BillRepository, BillTotals
from .models import TenantModels, build_tenant_models
from .room_repository import RoomRepository
from .stay_repository import StayRepository

__all__ = [
    "BillRepository",
    "BillTotals",
    "RoomRepository",
    "StayRepository",
    "TenantModels",
    "build_tenant_models",
]
