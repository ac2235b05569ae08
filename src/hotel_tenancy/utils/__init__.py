"""Utility helpers."""

from .single_flight import SingleFlight
from .timezone import ensure_utc, local_day_bounds, to_local, utc_now

__all__ = [
    "SingleFlight",
    "ensure_utc",
    "local_day_bounds",
    "to_local",
    "utc_now",
]
