"""Tenant-scoped billing preview."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....core.exceptions import EntityNotFoundError
from ....utils.timezone import utc_now
from ...tenants.routers.dependencies import get_tenant_context
from ...tenants.services.tenant_directory import TenantContext
from ..services.policy_engine import compute_charges

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/billing", tags=["Billing"])


@router.get("/stays/{stay_id}/charges")
async def preview_stay_charges(
    stay_id: str,
    context: TenantContext = Depends(get_tenant_context),
) -> Dict[str, Any]:
    """Charges for a stay as of now. Nothing is written."""
    models = context.models
    stay = await models.stays.get(stay_id)
    if stay is None:
        raise EntityNotFoundError("Stay", stay_id)
    room = await models.rooms.get(stay.room_id)
    if room is None:
        raise EntityNotFoundError("Room", stay.room_id)

    charges = compute_charges(stay, room, context.tenant.policy, utc_now())
    return {
        "tenant_id": context.tenant_id,
        "stay_id": str(stay.id),
        "room_number": room.number,
        "policy": context.tenant.policy.to_dict(),
        "charges": charges.to_dict(),
    }
