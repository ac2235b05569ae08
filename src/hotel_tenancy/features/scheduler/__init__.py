"""Scheduler feature: periodic billing reconciliation across hotels."""

from .entities import DailyBillingSummary, DailySummaryReport, PassReport, TaskStatus
from .services import JobMonitor, PeriodicTask, ReconciliationScheduler

__all__ = [
    "DailyBillingSummary",
    "DailySummaryReport",
    "JobMonitor",
    "PassReport",
    "PeriodicTask",
    "ReconciliationScheduler",
    "TaskStatus",
]
