"""Billing policy engine.

Pure functions: the caller supplies ``now`` and nothing here touches the
clock or the database. Hours and calendar dates are read in the hotel's
timezone; naive datetimes are taken as UTC.

Nights are calendar days between the local check-in date and the local
check-out date, minimum one. Time past the standard check-out hour is
billed by the late check-out surcharge, not by an extra night.
"""

import logging
from datetime import datetime
from decimal import Decimal

from ....config.constants import BillingHours, ChargePolicy, StayStatus
from ....utils.timezone import ensure_utc, to_local
from ...hotel.entities.room import Room
from ...hotel.entities.stay import Stay
from ...tenants.entities.tenant import BillingPolicy
from ..entities.charges import ChargeBreakdown

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HALF = Decimal("0.5")


def apply_policy(policy: ChargePolicy, price: Decimal) -> Decimal:
    """Surcharge for a policy-governed early or late hour."""
    if policy == ChargePolicy.HALF_RATE:
        return price * HALF
    if policy == ChargePolicy.FULL_RATE:
        return price
    return ZERO


def calculate_nights(local_check_in: datetime, local_check_out: datetime) -> int:
    """Calendar nights between two hotel-local instants, at least one."""
    days = (local_check_out.date() - local_check_in.date()).days
    return max(1, days)


def early_check_in_charge(hour: int, price: Decimal, policy: BillingPolicy) -> Decimal:
    """Surcharge for checking in at local ``hour``."""
    if hour >= policy.standard_check_in_hour:
        return ZERO
    if hour < BillingHours.EARLY_CHECK_IN_FULL_NIGHT_BEFORE:
        # Arrival before 6am occupies the prior night
        return price
    return apply_policy(policy.early_check_in_policy, price)


def late_check_out_charge(hour: int, price: Decimal, policy: BillingPolicy) -> Decimal:
    """Surcharge for checking out at local ``hour``."""
    if hour <= policy.standard_check_out_hour:
        return ZERO
    if hour > BillingHours.LATE_CHECK_OUT_FULL_NIGHT_AFTER:
        return price
    return apply_policy(policy.late_check_out_policy, price)


def effective_check_out(stay: Stay, now: datetime) -> datetime:
    """Actual check-out, or ``now`` while the guest is in house."""
    if stay.actual_check_out_date is not None:
        return stay.actual_check_out_date
    if stay.status == StayStatus.CHECKED_IN:
        return now
    return stay.check_out_date


def compute_charges(stay: Stay, room: Room, policy: BillingPolicy, now: datetime) -> ChargeBreakdown:
    """Compute nightly, early check-in and late check-out charges for a stay.

    Args:
        stay: The stay being billed
        room: The stay's room; ``room.price`` is the nightly rate
        policy: The hotel's billing policy
        now: Current instant, used as check-out for guests still in house

    Returns:
        ChargeBreakdown with every component and the total
    """
    check_in_at = ensure_utc(stay.effective_check_in)
    check_out_at = ensure_utc(effective_check_out(stay, now))
    is_ongoing = stay.actual_check_out_date is None and stay.status == StayStatus.CHECKED_IN

    local_in = to_local(check_in_at, policy.timezone)
    local_out = to_local(check_out_at, policy.timezone)

    price = room.price
    nights = calculate_nights(local_in, local_out)
    base = price * nights
    early = early_check_in_charge(local_in.hour, price, policy)
    late = late_check_out_charge(local_out.hour, price, policy)

    return ChargeBreakdown(
        nights=nights,
        room_price=price,
        base_charge=base,
        early_check_in_charge=early,
        late_check_out_charge=late,
        total=base + early + late,
        check_in_at=check_in_at,
        check_out_at=check_out_at,
        is_ongoing=is_ongoing,
    )
