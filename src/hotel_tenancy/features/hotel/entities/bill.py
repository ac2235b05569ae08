"""Bill entity and line items.

Totals follow the bill bookkeeping rules: tax and discount items are kept
out of the subtotal, discounts are subtracted by magnitude, and the status
follows the balance.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from ....config.constants import (
    OPEN_BILL_STATUSES,
    BillItemType,
    BillStatus,
    ItemOrigin,
    PolicyCharge,
)
from ....utils.timezone import utc_now

ZERO = Decimal("0")


@dataclass(frozen=True)
class BillItem:
    """One bill line item."""

    item_type: BillItemType
    description: str
    amount: Decimal
    origin: ItemOrigin = ItemOrigin.MANUAL
    policy_charge: Optional[PolicyCharge] = None
    quantity: int = 1
    unit_price: Optional[Decimal] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[Any] = None

    def __post_init__(self):
        object.__setattr__(self, "item_type", BillItemType(self.item_type))
        object.__setattr__(self, "origin", ItemOrigin(self.origin))
        if self.policy_charge is not None:
            object.__setattr__(self, "policy_charge", PolicyCharge(self.policy_charge))
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.quantity < 0:
            raise ValueError("Quantity cannot be negative")

    @property
    def is_reconciled_charge(self) -> bool:
        """System policy item owned by billing reconciliation."""
        return self.origin == ItemOrigin.SYSTEM and self.policy_charge is not None

    def signature(self) -> tuple:
        """Comparable identity of the charge, ignoring ids and timestamps."""
        return (
            self.item_type.value,
            self.origin.value,
            self.policy_charge.value if self.policy_charge else None,
            self.description,
            self.amount,
            self.quantity,
            self.unit_price,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BillItem":
        return cls(
            id=row.get("id"),
            item_type=row["item_type"],
            description=row["description"],
            amount=row["amount"],
            origin=row["origin"],
            policy_charge=row.get("policy_charge"),
            quantity=row.get("quantity") or 1,
            unit_price=row.get("unit_price"),
            notes=row.get("notes"),
            created_at=row.get("created_at"),
        )


@dataclass
class Bill:
    """A stay's bill."""

    id: Any
    stay_id: Any
    items: List[BillItem] = field(default_factory=list)
    status: BillStatus = BillStatus.ACTIVE
    paid_amount: Decimal = ZERO
    is_guest_checked_out: bool = False
    subtotal: Decimal = ZERO
    tax_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    total_amount: Decimal = ZERO
    balance_amount: Decimal = ZERO
    finalized_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.status = BillStatus(self.status)

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_BILL_STATUSES and not self.is_guest_checked_out

    def replace_reconciled_charges(self, new_items: Iterable[BillItem]) -> None:
        """Swap every reconciliation-owned item for ``new_items``.

        Manual items and other system items keep their order.
        """
        kept = [item for item in self.items if not item.is_reconciled_charge]
        self.items = kept + list(new_items)

    def recalculate_totals(self, now: Optional[datetime] = None) -> None:
        """Recompute totals and status from items and payments."""
        self.subtotal = sum(
            (i.amount for i in self.items
             if i.item_type not in (BillItemType.TAX, BillItemType.DISCOUNT)),
            ZERO,
        )
        self.tax_amount = sum(
            (i.amount for i in self.items if i.item_type == BillItemType.TAX), ZERO
        )
        self.discount_amount = sum(
            (abs(i.amount) for i in self.items if i.item_type == BillItemType.DISCOUNT), ZERO
        )
        self.total_amount = self.subtotal + self.tax_amount - self.discount_amount
        self.balance_amount = self.total_amount - self.paid_amount

        if self.status in (BillStatus.CANCELLED, BillStatus.FINALIZED):
            return

        if self.balance_amount <= 0 and self.total_amount > 0:
            self.status = BillStatus.PAID
        elif self.paid_amount > 0 and self.balance_amount > 0:
            self.status = BillStatus.PARTIALLY_PAID
        elif self.balance_amount > 0:
            self.status = BillStatus.ACTIVE

        if self.balance_amount <= 0 and self.is_guest_checked_out:
            self.status = BillStatus.FINALIZED
            self.finalized_at = now or utc_now()

    def copy(self) -> "Bill":
        return replace(self, items=list(self.items))

    @classmethod
    def from_row(cls, row: Mapping[str, Any], items: Iterable[BillItem] = ()) -> "Bill":
        return cls(
            id=row["id"],
            stay_id=row["stay_id"],
            items=list(items),
            status=row["status"],
            paid_amount=row.get("paid_amount") or ZERO,
            is_guest_checked_out=bool(row.get("is_guest_checked_out")),
            subtotal=row.get("subtotal") or ZERO,
            tax_amount=row.get("tax_amount") or ZERO,
            discount_amount=row.get("discount_amount") or ZERO,
            total_amount=row.get("total_amount") or ZERO,
            balance_amount=row.get("balance_amount") or ZERO,
            finalized_at=row.get("finalized_at"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
