"""Constants and enums for hotel-tenancy.

Values shared by the registry schema, the tenant schemas and the
billing engine. Stored enum values are lowercase strings.
"""

from enum import Enum
from typing import Final


class DatabaseNames:
    """Logical database naming."""

    TENANT_PREFIX: Final[str] = "tenant_"


class RegistryTables:
    """Tables in the registry (main) database."""

    HOTELS: Final[str] = "hotels"


class TenantTables:
    """Tables in every tenant database."""

    ROOMS: Final[str] = "rooms"
    STAYS: Final[str] = "stays"
    BILLS: Final[str] = "bills"
    BILL_ITEMS: Final[str] = "bill_items"


class CacheTTL:
    """Cache TTL values in seconds."""

    TENANT_DIRECTORY: Final[int] = 300  # 5 minutes


class ScheduleIntervals:
    """Default reconciliation intervals in seconds."""

    HOURLY_RECALCULATION: Final[int] = 3600
    LATE_CHECKOUT_SWEEP: Final[int] = 900
    DAILY_SUMMARY: Final[int] = 86400


class BillingHours:
    """Hour thresholds that override the hotel policy."""

    EARLY_CHECK_IN_FULL_NIGHT_BEFORE: Final[int] = 6
    LATE_CHECK_OUT_FULL_NIGHT_AFTER: Final[int] = 18


class TenantStatus(str, Enum):
    """Hotel account status in the registry."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class ChargePolicy(str, Enum):
    """Surcharge policy for early check-in and late check-out."""

    FREE = "free"
    HALF_RATE = "half_rate"
    FULL_RATE = "full_rate"

    @property
    def label(self) -> str:
        return {
            ChargePolicy.FREE: "Free",
            ChargePolicy.HALF_RATE: "Half Rate",
            ChargePolicy.FULL_RATE: "Full Rate",
        }[self]


class StayStatus(str, Enum):
    """Lifecycle of a guest stay."""

    RESERVED = "reserved"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"


class BillStatus(str, Enum):
    """Bill settlement status."""

    ACTIVE = "active"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    CANCELLED = "cancelled"
    FINALIZED = "finalized"


# Bills that reconciliation may still rewrite
OPEN_BILL_STATUSES: Final[tuple] = (
    BillStatus.ACTIVE,
    BillStatus.PARTIALLY_PAID,
    BillStatus.PAID,
)


class BillItemType(str, Enum):
    """Semantic type of a bill line item."""

    ROOM_CHARGE = "room_charge"
    FOOD_ORDER = "food_order"
    SERVICE_CHARGE = "service_charge"
    TAX = "tax"
    DISCOUNT = "discount"
    ADVANCE_PAYMENT = "advance_payment"
    OTHER = "other"


class ItemOrigin(str, Enum):
    """Who added a bill line item."""

    SYSTEM = "system"
    MANUAL = "manual"


class PolicyCharge(str, Enum):
    """System line items owned by billing reconciliation."""

    NIGHTLY = "nightly"
    EARLY_CHECK_IN = "early_check_in"
    LATE_CHECK_OUT = "late_check_out"


class TaskState(str, Enum):
    """Periodic task state."""

    IDLE = "idle"
    RUNNING = "running"
