"""Tests for billing reconciliation."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from hotel_tenancy.config.constants import BillItemType, BillStatus, ItemOrigin, PolicyCharge
from hotel_tenancy.core.exceptions import InvariantViolationError
from hotel_tenancy.features.billing.services.reconciler import BillingReconciler
from hotel_tenancy.features.hotel.entities import Bill, BillItem


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def item_set(bill):
    return sorted(item.signature() for item in bill.items)


@pytest.fixture
def reconciler():
    return BillingReconciler()


class TestBillingReconciler:

    @pytest.mark.asyncio
    async def test_generates_policy_items(self, reconciler, sample_bill, sample_stay, sample_room,
                                          half_rate_policy, models_factory):
        models = models_factory(bills=[sample_bill])
        now = utc(2024, 3, 2, 11)

        charges = await reconciler.reconcile(sample_bill, sample_stay, sample_room, half_rate_policy,
                                             now, models.bills)

        assert charges.total == Decimal("7500")
        by_charge = {item.policy_charge: item for item in sample_bill.items}
        nightly = by_charge[PolicyCharge.NIGHTLY]
        early = by_charge[PolicyCharge.EARLY_CHECK_IN]
        assert nightly.item_type == BillItemType.ROOM_CHARGE
        assert nightly.description == "Room 101 - 1 night(s)"
        assert nightly.quantity == 1
        assert early.item_type == BillItemType.SERVICE_CHARGE
        assert early.description == "Early Check-in (Half Rate)"
        assert PolicyCharge.LATE_CHECK_OUT not in by_charge
        assert sample_bill.total_amount == Decimal("7500")
        assert models.bills.saved[-1].total_amount == Decimal("7500")

    @pytest.mark.asyncio
    async def test_idempotent(self, reconciler, sample_bill, sample_stay, sample_room,
                              half_rate_policy, models_factory):
        models = models_factory(bills=[sample_bill])
        now = utc(2024, 3, 2, 11)

        await reconciler.reconcile(sample_bill, sample_stay, sample_room, half_rate_policy, now, models.bills)
        first_items, first_total = item_set(sample_bill), sample_bill.total_amount
        await reconciler.reconcile(sample_bill, sample_stay, sample_room, half_rate_policy, now, models.bills)

        assert item_set(sample_bill) == first_items
        assert sample_bill.total_amount == first_total
        assert len(sample_bill.items) == 2

    @pytest.mark.asyncio
    async def test_replaces_stale_items_and_keeps_manual_ones(self, reconciler, sample_stay, sample_room,
                                                             half_rate_policy, models_factory):
        dinner = BillItem(item_type=BillItemType.FOOD_ORDER, description="Dinner", amount=Decimal("800"))
        stale = BillItem(item_type=BillItemType.ROOM_CHARGE, description="Room 101 - 5 night(s)",
                         amount=Decimal("25000"), origin=ItemOrigin.SYSTEM,
                         policy_charge=PolicyCharge.NIGHTLY)
        stale_late = BillItem(item_type=BillItemType.SERVICE_CHARGE, description="Late Check-out (Half Rate)",
                              amount=Decimal("2500"), origin=ItemOrigin.SYSTEM,
                              policy_charge=PolicyCharge.LATE_CHECK_OUT)
        bill = Bill(id="bill-1", stay_id="stay-1", items=[dinner, stale, stale_late])
        models = models_factory(bills=[bill])

        await reconciler.reconcile(bill, sample_stay, sample_room, half_rate_policy,
                                   utc(2024, 3, 2, 11), models.bills)

        assert bill.items[0] is dinner
        nightly = [i for i in bill.items if i.policy_charge == PolicyCharge.NIGHTLY]
        assert len(nightly) == 1
        assert nightly[0].amount == Decimal("5000")
        assert not any(i.policy_charge == PolicyCharge.LATE_CHECK_OUT for i in bill.items)
        assert bill.total_amount == Decimal("8300")

    @pytest.mark.asyncio
    async def test_keeps_item_added_after_load(self, reconciler, sample_bill, sample_stay, sample_room,
                                               half_rate_policy, models_factory):
        models = models_factory(bills=[sample_bill])
        loaded = await models.bills.find_open_for_stay("stay-1")
        models.bills.bills["stay-1"].items.append(
            BillItem(item_type=BillItemType.FOOD_ORDER, description="Room service", amount=Decimal("1200"))
        )

        await reconciler.reconcile(loaded, sample_stay, sample_room, half_rate_policy,
                                   utc(2024, 3, 2, 11), models.bills)

        assert "Room service" in [item.description for item in loaded.items]
        assert loaded.total_amount == Decimal("8700")
        assert models.bills.bills["stay-1"].total_amount == Decimal("8700")

    @pytest.mark.asyncio
    async def test_in_house_guest_accrues(self, reconciler, sample_bill, sample_stay, sample_room,
                                          half_rate_policy, models_factory):
        models = models_factory(bills=[sample_bill])

        await reconciler.reconcile(sample_bill, sample_stay, sample_room, half_rate_policy,
                                   utc(2024, 3, 2, 11), models.bills)
        early_total = sample_bill.total_amount
        await reconciler.reconcile(sample_bill, sample_stay, sample_room, half_rate_policy,
                                   utc(2024, 3, 4, 20), models.bills)

        # 3 nights + half-rate early check-in + full late check-out after 6pm
        assert sample_bill.total_amount == Decimal("22500")
        assert sample_bill.total_amount > early_total

    @pytest.mark.asyncio
    async def test_payments_drive_status(self, reconciler, sample_stay, sample_room,
                                         half_rate_policy, models_factory):
        bill = Bill(id="bill-1", stay_id="stay-1", paid_amount=Decimal("7500"))
        models = models_factory(bills=[bill])

        await reconciler.reconcile(bill, sample_stay, sample_room, half_rate_policy,
                                   utc(2024, 3, 2, 11), models.bills)

        assert bill.balance_amount == 0
        assert bill.status == BillStatus.PAID

    def test_rejects_bill_of_another_stay(self, reconciler, sample_stay, sample_room, half_rate_policy):
        bill = Bill(id="bill-9", stay_id="someone-else")

        with pytest.raises(InvariantViolationError):
            reconciler.apply(bill, sample_stay, sample_room, half_rate_policy, utc(2024, 3, 2))
