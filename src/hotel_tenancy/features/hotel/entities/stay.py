"""Stay entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ....config.constants import StayStatus


@dataclass(frozen=True)
class Stay:
    """One guest's occupancy of one room.

    ``actual_check_out_date`` is None while the guest is still in house.
    """

    id: Any
    room_id: Any
    check_in_date: datetime
    check_out_date: datetime
    status: StayStatus = StayStatus.CHECKED_IN
    guest_name: str = ""
    actual_check_in_date: Optional[datetime] = None
    actual_check_out_date: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "status", StayStatus(self.status))

    @property
    def effective_check_in(self) -> datetime:
        return self.actual_check_in_date or self.check_in_date

    @property
    def is_ongoing(self) -> bool:
        return self.actual_check_out_date is None

    def is_overdue(self, now: datetime) -> bool:
        """Still checked in past the expected check-out."""
        return self.status == StayStatus.CHECKED_IN and self.check_out_date < now

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Stay":
        return cls(
            id=row["id"],
            room_id=row["room_id"],
            guest_name=row.get("guest_name") or "",
            check_in_date=row["check_in_date"],
            actual_check_in_date=row.get("actual_check_in_date"),
            check_out_date=row["check_out_date"],
            actual_check_out_date=row.get("actual_check_out_date"),
            status=row["status"],
        )
