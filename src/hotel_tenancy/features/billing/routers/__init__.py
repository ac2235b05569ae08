"""Billing routers."""

from .billing_router import router

__all__ = ["router"]
