"""Bill repository bound to one tenant pool.

A bill and its items are written together in one transaction, so readers
never observe a bill whose items and totals disagree.
"""

import logging
from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

import asyncpg

from ....config.constants import OPEN_BILL_STATUSES, ItemOrigin, TenantTables
from ....core.exceptions import EntityNotFoundError, InvariantViolationError
from ....utils.timezone import utc_now
from ..entities.bill import Bill, BillItem

logger = logging.getLogger(__name__)

_BILL_COLUMNS = (
    "id, stay_id, status, paid_amount, is_guest_checked_out, subtotal, tax_amount, "
    "discount_amount, total_amount, balance_amount, finalized_at, created_at, updated_at"
)
_ITEM_COLUMNS = (
    "id, item_type, description, amount, origin, policy_charge, quantity, "
    "unit_price, notes, created_at"
)


@dataclass(frozen=True)
class BillTotals:
    """Aggregated bill figures for a period."""

    total_bills: int = 0
    total_revenue: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    total_outstanding: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_bills": self.total_bills,
            "total_revenue": str(self.total_revenue),
            "total_paid": str(self.total_paid),
            "total_outstanding": str(self.total_outstanding),
        }


class BillRepository:
    """Read/write access to a tenant's bills."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool
        self._table = TenantTables.BILLS
        self._items_table = TenantTables.BILL_ITEMS

    async def find_open_for_stay(self, stay_id: Any) -> Optional[Bill]:
        """Find the bill reconciliation may rewrite for a stay."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                    SELECT {_BILL_COLUMNS} FROM {self._table}
                    WHERE stay_id = $1
                      AND status = ANY($2::text[])
                      AND is_guest_checked_out = false
                    ORDER BY created_at DESC
                    LIMIT 1
                """,
                stay_id,
                [status.value for status in OPEN_BILL_STATUSES],
            )
            if not row:
                return None
            item_rows = await conn.fetch(
                f"SELECT {_ITEM_COLUMNS} FROM {self._items_table} "
                f"WHERE bill_id = $1 ORDER BY position",
                row["id"],
            )
        return Bill.from_row(row, (BillItem.from_row(item) for item in item_rows))

    async def save(self, bill: Bill) -> Bill:
        """Write the bill's reconciliation-owned items and the resulting totals.

        The bill row is locked and its other items are re-read inside the
        transaction, so items added after ``bill`` was loaded are kept and
        counted. Only system items carrying a policy charge are replaced.
        ``bill`` is updated in place to the stored state.

        Raises:
            EntityNotFoundError: the bill no longer exists
            InvariantViolationError: the bill was closed after it was loaded
        """
        now = utc_now()
        fresh = [item for item in bill.items if item.is_reconciled_charge]
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    f"SELECT {_BILL_COLUMNS} FROM {self._table} WHERE id = $1 FOR UPDATE",
                    bill.id,
                )
                if not row:
                    raise EntityNotFoundError("Bill", bill.id)
                item_rows = await conn.fetch(
                    f"SELECT {_ITEM_COLUMNS}, position FROM {self._items_table} "
                    f"WHERE bill_id = $1 ORDER BY position",
                    bill.id,
                )
                stored = Bill.from_row(row, (BillItem.from_row(item) for item in item_rows))
                if not stored.is_open:
                    raise InvariantViolationError(
                        f"Bill {bill.id} is no longer open", stay_id=bill.stay_id
                    )

                await conn.execute(
                    f"""
                        DELETE FROM {self._items_table}
                        WHERE bill_id = $1 AND origin = $2 AND policy_charge IS NOT NULL
                    """,
                    bill.id,
                    ItemOrigin.SYSTEM.value,
                )
                if fresh:
                    first_position = max((r["position"] for r in item_rows), default=-1) + 1
                    await conn.executemany(
                        f"""
                            INSERT INTO {self._items_table} (
                                bill_id, position, item_type, description, amount, origin,
                                policy_charge, quantity, unit_price, notes, created_at
                            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                        """,
                        [
                            (
                                bill.id, first_position + offset, item.item_type.value,
                                item.description, item.amount, item.origin.value,
                                item.policy_charge.value, item.quantity, item.unit_price,
                                item.notes, item.created_at or now,
                            )
                            for offset, item in enumerate(fresh)
                        ],
                    )

                stored.replace_reconciled_charges(fresh)
                stored.recalculate_totals(now=now)
                await conn.execute(
                    f"""
                        UPDATE {self._table} SET
                            status = $2, subtotal = $3, tax_amount = $4, discount_amount = $5,
                            total_amount = $6, balance_amount = $7, finalized_at = $8,
                            updated_at = $9
                        WHERE id = $1
                    """,
                    bill.id, stored.status.value, stored.subtotal, stored.tax_amount,
                    stored.discount_amount, stored.total_amount, stored.balance_amount,
                    stored.finalized_at, now,
                )
        stored.updated_at = now
        for f in fields(Bill):
            setattr(bill, f.name, getattr(stored, f.name))
        logger.debug(f"Saved bill {bill.id} with {len(bill.items)} items, total {bill.total_amount}")
        return bill

    async def summarize_created_between(self, start: datetime, end: datetime) -> BillTotals:
        """Totals of bills created in ``[start, end)``."""
        row = await self._pool.fetchrow(
            f"""
                SELECT count(*) AS total_bills,
                       coalesce(sum(total_amount), 0) AS total_revenue,
                       coalesce(sum(paid_amount), 0) AS total_paid,
                       coalesce(sum(balance_amount), 0) AS total_outstanding
                FROM {self._table}
                WHERE created_at >= $1 AND created_at < $2
            """,
            start,
            end,
        )
        if not row:
            return BillTotals()
        return BillTotals(
            total_bills=int(row["total_bills"]),
            total_revenue=Decimal(row["total_revenue"]),
            total_paid=Decimal(row["total_paid"]),
            total_outstanding=Decimal(row["total_outstanding"]),
        )
