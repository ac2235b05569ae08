"""Scheduler services."""

from .job_monitor import JobMonitor, JobStats
from .periodic_task import PeriodicTask
from .reconciliation_scheduler import (
    DAILY_SUMMARY,
    HOURLY_RECALCULATION,
    LATE_CHECKOUT_SWEEP,
    ReconciliationScheduler,
)

__all__ = [
    "DAILY_SUMMARY",
    "HOURLY_RECALCULATION",
    "LATE_CHECKOUT_SWEEP",
    "JobMonitor",
    "JobStats",
    "PeriodicTask",
    "ReconciliationScheduler",
]
