"""Billing services."""

from .policy_engine import (
    apply_policy,
    calculate_nights,
    compute_charges,
    early_check_in_charge,
    effective_check_out,
    late_check_out_charge,
)
from .reconciler import BillingReconciler, generate_billing_items

__all__ = [
    "BillingReconciler",
    "apply_policy",
    "calculate_nights",
    "compute_charges",
    "early_check_in_charge",
    "effective_check_out",
    "generate_billing_items",
    "late_check_out_charge",
]
