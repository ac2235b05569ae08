"""Tenant domain entity.

A tenant is one hotel account as recorded in the registry database.
The record is read-only to this service; provisioning owns its lifecycle.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ....config.constants import ChargePolicy, TenantStatus

TENANT_ID_PATTERN = re.compile(r"^[a-z0-9-]{1,50}$")


def normalize_tenant_id(tenant_id: str) -> str:
    """Normalize a tenant identifier for lookups and cache keys."""
    return tenant_id.strip().lower()


@dataclass(frozen=True)
class BillingPolicy:
    """Hotel check-in / check-out billing policy."""

    standard_check_in_hour: int = 14
    standard_check_out_hour: int = 12
    early_check_in_policy: ChargePolicy = ChargePolicy.FREE
    late_check_out_policy: ChargePolicy = ChargePolicy.FREE
    timezone: str = "UTC"

    def __post_init__(self):
        for name in ("standard_check_in_hour", "standard_check_out_hour"):
            hour = getattr(self, name)
            if not 0 <= hour <= 23:
                raise ValueError(f"{name} must be between 0 and 23, got {hour}")
        # Accept raw strings from the registry
        object.__setattr__(self, "early_check_in_policy", ChargePolicy(self.early_check_in_policy))
        object.__setattr__(self, "late_check_out_policy", ChargePolicy(self.late_check_out_policy))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standard_check_in_hour": self.standard_check_in_hour,
            "standard_check_out_hour": self.standard_check_out_hour,
            "early_check_in_policy": self.early_check_in_policy.value,
            "late_check_out_policy": self.late_check_out_policy.value,
            "timezone": self.timezone,
        }


@dataclass(frozen=True)
class TenantRecord:
    """Hotel tenant entity.

    Matches the registry ``hotels`` table.
    """

    tenant_id: str
    name: str
    status: TenantStatus = TenantStatus.ACTIVE
    policy: BillingPolicy = field(default_factory=BillingPolicy)
    id: Optional[Any] = None

    def __post_init__(self):
        normalized = normalize_tenant_id(self.tenant_id)
        if not TENANT_ID_PATTERN.match(normalized):
            raise ValueError(f"Invalid tenant identifier '{self.tenant_id}'")
        object.__setattr__(self, "tenant_id", normalized)
        object.__setattr__(self, "status", TenantStatus(self.status))

    @property
    def is_active(self) -> bool:
        """Check if the hotel is served."""
        return self.status == TenantStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "name": self.name,
            "status": self.status.value,
            "policy": self.policy.to_dict(),
        }
