"""Billing feature: policy engine and bill reconciliation."""

from .entities import ChargeBreakdown
from .services import BillingReconciler, compute_charges, generate_billing_items

__all__ = [
    "BillingReconciler",
    "ChargeBreakdown",
    "compute_charges",
    "generate_billing_items",
]
