"""Hotel entities."""

from .bill import Bill, BillItem
from .room import Room
from .stay import Stay

__all__ = ["Bill", "BillItem", "Room", "Stay"]
