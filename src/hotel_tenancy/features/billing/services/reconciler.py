"""Billing reconciliation: write computed charges back to a bill.

Reconciliation owns the system items tagged with a policy charge. Each
pass drops them, appends the freshly computed non-zero set, recomputes
totals and saves items and totals together.
"""

import logging
from datetime import datetime
from typing import List

from ....config.constants import BillItemType, ItemOrigin, PolicyCharge
from ....core.exceptions import InvariantViolationError
from ...hotel.entities.bill import Bill, BillItem
from ...hotel.entities.room import Room
from ...hotel.entities.stay import Stay
from ...hotel.repositories.bill_repository import BillRepository
from ...tenants.entities.tenant import BillingPolicy
from ..entities.charges import ChargeBreakdown
from .policy_engine import compute_charges

logger = logging.getLogger(__name__)


def generate_billing_items(
    charges: ChargeBreakdown,
    room: Room,
    policy: BillingPolicy,
    now: datetime,
) -> List[BillItem]:
    """System items for the non-zero components of ``charges``."""
    items = []
    if charges.base_charge > 0:
        items.append(BillItem(
            item_type=BillItemType.ROOM_CHARGE,
            description=f"Room {room.number} - {charges.nights} night(s)",
            amount=charges.base_charge,
            origin=ItemOrigin.SYSTEM,
            policy_charge=PolicyCharge.NIGHTLY,
            quantity=charges.nights,
            unit_price=charges.room_price,
            created_at=now,
        ))
    if charges.early_check_in_charge > 0:
        items.append(BillItem(
            item_type=BillItemType.SERVICE_CHARGE,
            description=f"Early Check-in ({policy.early_check_in_policy.label})",
            amount=charges.early_check_in_charge,
            origin=ItemOrigin.SYSTEM,
            policy_charge=PolicyCharge.EARLY_CHECK_IN,
            unit_price=charges.early_check_in_charge,
            created_at=now,
        ))
    if charges.late_check_out_charge > 0:
        items.append(BillItem(
            item_type=BillItemType.SERVICE_CHARGE,
            description=f"Late Check-out ({policy.late_check_out_policy.label})",
            amount=charges.late_check_out_charge,
            origin=ItemOrigin.SYSTEM,
            policy_charge=PolicyCharge.LATE_CHECK_OUT,
            unit_price=charges.late_check_out_charge,
            created_at=now,
        ))
    return items


class BillingReconciler:
    """Recompute and persist a bill's policy charges."""

    def apply(self, bill: Bill, stay: Stay, room: Room, policy: BillingPolicy,
              now: datetime) -> ChargeBreakdown:
        """Rewrite ``bill`` in memory; nothing is saved."""
        if bill.stay_id != stay.id:
            raise InvariantViolationError(
                f"Bill {bill.id} does not belong to stay {stay.id}", stay_id=stay.id
            )
        charges = compute_charges(stay, room, policy, now)
        bill.replace_reconciled_charges(generate_billing_items(charges, room, policy, now))
        bill.recalculate_totals(now=now)
        return charges

    async def reconcile(
        self,
        bill: Bill,
        stay: Stay,
        room: Room,
        policy: BillingPolicy,
        now: datetime,
        bills: BillRepository,
    ) -> ChargeBreakdown:
        """Recompute ``bill`` for ``stay`` and save it in one transaction."""
        charges = self.apply(bill, stay, room, policy, now)
        await bills.save(bill)
        logger.debug(
            f"Reconciled bill {bill.id} for stay {stay.id}: "
            f"{charges.nights} night(s), total {charges.total}"
        )
        return charges
