"""Computed stay charges."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict


@dataclass(frozen=True)
class ChargeBreakdown:
    """Policy-driven charges for one stay at one instant."""

    nights: int
    room_price: Decimal
    base_charge: Decimal
    early_check_in_charge: Decimal
    late_check_out_charge: Decimal
    total: Decimal
    check_in_at: datetime
    check_out_at: datetime
    is_ongoing: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nights": self.nights,
            "room_price": str(self.room_price),
            "base_charge": str(self.base_charge),
            "early_check_in_charge": str(self.early_check_in_charge),
            "late_check_out_charge": str(self.late_check_out_charge),
            "total": str(self.total),
            "check_in_at": self.check_in_at.isoformat(),
            "check_out_at": self.check_out_at.isoformat(),
            "is_ongoing": self.is_ongoing,
        }
