"""Room entity."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Room:
    """A bookable room and its nightly price."""

    id: Any
    number: str
    price: Decimal
    room_type: Optional[str] = None

    def __post_init__(self):
        price = Decimal(str(self.price)) if not isinstance(self.price, Decimal) else self.price
        if price < 0:
            raise ValueError("Room price cannot be negative")
        object.__setattr__(self, "price", price)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Room":
        return cls(
            id=row["id"],
            number=row["number"],
            price=row["price"] if row["price"] is not None else Decimal("0"),
            room_type=row.get("room_type"),
        )
