"""Billing entities."""

from .charges import ChargeBreakdown

__all__ = ["ChargeBreakdown"]
