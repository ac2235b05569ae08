"""Scheduler entities."""

from .task import DailyBillingSummary, DailySummaryReport, PassReport, TaskStatus

__all__ = ["DailyBillingSummary", "DailySummaryReport", "PassReport", "TaskStatus"]
