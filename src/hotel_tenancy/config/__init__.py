"""Configuration module for hotel-tenancy."""

from .constants import (
    BillItemType,
    BillStatus,
    ChargePolicy,
    ItemOrigin,
    PolicyCharge,
    StayStatus,
    TaskState,
    TenantStatus,
)
from .logging_config import LogFormat, LoggingConfig, LogVerbosity, get_logger, setup_logging
from .settings import HotelTenancySettings, get_settings

__all__ = [
    # Enums
    "BillItemType",
    "BillStatus",
    "ChargePolicy",
    "ItemOrigin",
    "PolicyCharge",
    "StayStatus",
    "TaskState",
    "TenantStatus",

    # Settings
    "HotelTenancySettings",
    "get_settings",

    # Logging
    "LogFormat",
    "LoggingConfig",
    "LogVerbosity",
    "get_logger",
    "setup_logging",
]
