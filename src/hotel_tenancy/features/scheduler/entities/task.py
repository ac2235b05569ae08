"""Scheduler entities: pass reports, daily summaries and task status."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ....config.constants import TaskState
from ....core.exceptions import PartialReconciliationError


@dataclass
class PassReport:
    """Outcome of one reconciliation pass across all tenants."""

    task_name: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    tenants_total: int = 0
    tenants_processed: int = 0
    stays_processed: int = 0
    stays_updated: int = 0
    # tenant id -> error message
    tenant_errors: Dict[str, str] = field(default_factory=dict)
    # tenant id -> {stay id -> error message}
    stay_errors: Dict[str, Dict[str, str]] = field(default_factory=dict)
    registry_error: Optional[str] = None
    stopped_early: bool = False

    @property
    def tenant_error_count(self) -> int:
        return len(self.tenant_errors)

    @property
    def stay_error_count(self) -> int:
        return sum(len(errors) for errors in self.stay_errors.values())

    @property
    def has_failures(self) -> bool:
        return bool(self.registry_error or self.tenant_errors or self.stay_errors)

    @property
    def records_processed(self) -> int:
        return self.stays_updated

    @property
    def error_count(self) -> int:
        registry = 1 if self.registry_error else 0
        return registry + self.tenant_error_count + self.stay_error_count

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    def record_tenant_error(self, tenant_id: str, error: Exception) -> None:
        self.tenant_errors[tenant_id] = str(error)

    def record_stay_error(self, tenant_id: str, stay_id: Any, error: Exception) -> None:
        self.stay_errors.setdefault(tenant_id, {})[str(stay_id)] = str(error)

    def as_error(self) -> Optional[PartialReconciliationError]:
        """The pass as a loggable error, or None if it was clean."""
        if not self.has_failures:
            return None
        details = {
            "tenants_processed": self.tenants_processed,
            "stays_updated": self.stays_updated,
            "failed_tenants": sorted(self.tenant_errors),
            "stay_errors_by_tenant": {k: len(v) for k, v in self.stay_errors.items()},
        }
        if self.registry_error:
            details["registry_error"] = self.registry_error
        return PartialReconciliationError(
            self.task_name,
            tenant_errors=self.tenant_error_count,
            stay_errors=self.stay_error_count,
            details=details,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task": self.task_name,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_seconds": self.duration_seconds,
            "tenants_total": self.tenants_total,
            "tenants_processed": self.tenants_processed,
            "stays_processed": self.stays_processed,
            "stays_updated": self.stays_updated,
            "tenant_errors": dict(self.tenant_errors),
            "stay_errors": {k: dict(v) for k, v in self.stay_errors.items()},
            "registry_error": self.registry_error,
            "stopped_early": self.stopped_early,
        }


@dataclass(frozen=True)
class DailyBillingSummary:
    """One hotel's billing figures for a local day."""

    tenant_id: str
    day: date
    total_bills: int
    total_revenue: Decimal
    total_paid: Decimal
    total_outstanding: Decimal
    active_guests: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenant_id": self.tenant_id,
            "day": self.day.isoformat(),
            "total_bills": self.total_bills,
            "total_revenue": str(self.total_revenue),
            "total_paid": str(self.total_paid),
            "total_outstanding": str(self.total_outstanding),
            "active_guests": self.active_guests,
        }


@dataclass
class DailySummaryReport:
    """Outcome of one daily summary pass."""

    summaries: List[DailyBillingSummary] = field(default_factory=list)
    # tenant id -> error message
    tenant_errors: Dict[str, str] = field(default_factory=dict)
    registry_error: Optional[str] = None

    @property
    def has_failures(self) -> bool:
        return bool(self.registry_error or self.tenant_errors)

    @property
    def records_processed(self) -> int:
        return len(self.summaries)

    @property
    def error_count(self) -> int:
        return (1 if self.registry_error else 0) + len(self.tenant_errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summaries": [summary.to_dict() for summary in self.summaries],
            "tenant_errors": dict(self.tenant_errors),
            "registry_error": self.registry_error,
        }


@dataclass
class TaskStatus:
    """Point-in-time view of a periodic task."""

    name: str
    state: TaskState
    interval_seconds: float
    ticking: bool
    runs: int
    skipped_ticks: int
    last_started_at: Optional[datetime] = None
    last_finished_at: Optional[datetime] = None
    last_error: Optional[str] = None
    last_result: Any = None

    def to_dict(self) -> Dict[str, Any]:
        result = self.last_result
        if hasattr(result, "to_dict"):
            result = result.to_dict()
        elif isinstance(result, list):
            result = [item.to_dict() if hasattr(item, "to_dict") else item for item in result]
        return {
            "name": self.name,
            "state": self.state.value,
            "interval_seconds": self.interval_seconds,
            "ticking": self.ticking,
            "runs": self.runs,
            "skipped_ticks": self.skipped_ticks,
            "last_started_at": self.last_started_at.isoformat() if self.last_started_at else None,
            "last_finished_at": self.last_finished_at.isoformat() if self.last_finished_at else None,
            "last_error": self.last_error,
            "last_result": result,
        }
