"""Reconciliation scheduler.

Runs three periodic passes over every active hotel:

- hourly_recalculation: reconcile every in-house stay
- late_checkout_sweep: reconcile in-house stays past their expected check-out
- daily_summary: per-hotel billing figures for the current local day

One hotel's failure never stops the pass. Stay-level failures are counted
per hotel and tenant-level failures per pass; a pass with failures is logged
as a PartialReconciliationError and retried on the next tick.
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ....config.settings import HotelTenancySettings, get_settings
from ....core.exceptions import DatabaseUnavailableError, InvariantViolationError
from ....utils.timezone import local_day_bounds, to_local, utc_now
from ...billing.services.reconciler import BillingReconciler
from ...database.repositories.connection_manager import ConnectionManager
from ...hotel.entities.stay import Stay
from ...hotel.repositories.models import TenantModels
from ...tenants.entities.tenant import BillingPolicy, TenantRecord
from ...tenants.services.tenant_directory import TenantContext, TenantDirectory
from ..entities.task import DailyBillingSummary, DailySummaryReport, PassReport
from .job_monitor import JobMonitor
from .periodic_task import PeriodicTask

logger = logging.getLogger(__name__)

HOURLY_RECALCULATION = "hourly_recalculation"
LATE_CHECKOUT_SWEEP = "late_checkout_sweep"
DAILY_SUMMARY = "daily_summary"

StayLoader = Callable[[TenantModels, datetime], Awaitable[List[Stay]]]


async def _checked_in_stays(models: TenantModels, now: datetime) -> List[Stay]:
    return await models.stays.list_checked_in()


async def _overdue_stays(models: TenantModels, now: datetime) -> List[Stay]:
    return await models.stays.list_overdue(now)


class ReconciliationScheduler:
    """Fans billing reconciliation out across tenants on fixed intervals."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        directory: TenantDirectory,
        reconciler: Optional[BillingReconciler] = None,
        settings: Optional[HotelTenancySettings] = None,
        monitor: Optional[JobMonitor] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        settings = settings or get_settings()
        self._connections = connection_manager
        self._directory = directory
        self._reconciler = reconciler or BillingReconciler()
        self._clock = clock
        self._monitor = monitor or JobMonitor(clock=clock)
        self._stopping = False

        self._tasks: Dict[str, PeriodicTask] = {
            HOURLY_RECALCULATION: PeriodicTask(
                HOURLY_RECALCULATION,
                settings.hourly_recalculation_interval,
                self._monitored(HOURLY_RECALCULATION, self.recalculate_all_billing),
                clock=clock,
            ),
            LATE_CHECKOUT_SWEEP: PeriodicTask(
                LATE_CHECKOUT_SWEEP,
                settings.late_checkout_sweep_interval,
                self._monitored(LATE_CHECKOUT_SWEEP, self.check_late_checkouts),
                clock=clock,
            ),
            DAILY_SUMMARY: PeriodicTask(
                DAILY_SUMMARY,
                settings.daily_summary_interval,
                self._monitored(DAILY_SUMMARY, self.run_daily_summary),
                clock=clock,
            ),
        }
        for name, task in self._tasks.items():
            self._monitor.register(name, task.interval_seconds)

    @property
    def tasks(self) -> Dict[str, PeriodicTask]:
        return self._tasks

    @property
    def monitor(self) -> JobMonitor:
        return self._monitor

    @property
    def is_running(self) -> bool:
        return any(task.is_ticking for task in self._tasks.values())

    # Lifecycle

    def start(self) -> None:
        """Start every ticker."""
        self._stopping = False
        for task in self._tasks.values():
            task.start()
        logger.info("Reconciliation scheduler started")

    async def stop(self) -> None:
        """Stop tickers and let running passes finish their current stay."""
        self._stopping = True
        for task in self._tasks.values():
            await task.stop()
        self._stopping = False
        logger.info("Reconciliation scheduler stopped")

    async def trigger_manual_reconciliation(self) -> Optional[PassReport]:
        """Run the hourly pass now. None if it is already running."""
        logger.info("Manual billing reconciliation triggered")
        return await self._tasks[HOURLY_RECALCULATION].run_once()

    def status(self) -> Dict[str, Any]:
        return {
            "is_running": self.is_running,
            "tasks": {name: task.status().to_dict() for name, task in self._tasks.items()},
            "jobs": self._monitor.all_stats(),
            "health": self._monitor.health(),
        }

    # Passes

    async def recalculate_all_billing(self) -> PassReport:
        """Reconcile every in-house stay of every active hotel."""
        return await self._reconcile_pass(HOURLY_RECALCULATION, _checked_in_stays)

    async def check_late_checkouts(self) -> PassReport:
        """Reconcile in-house stays whose expected check-out has passed."""
        return await self._reconcile_pass(LATE_CHECKOUT_SWEEP, _overdue_stays)

    async def generate_daily_summary(self) -> List[DailyBillingSummary]:
        """Billing figures for the current local day of every active hotel."""
        report = await self.run_daily_summary()
        return report.summaries

    async def run_daily_summary(self) -> DailySummaryReport:
        """Daily summary pass, with the hotels that could not be summarized."""
        now = self._clock()
        report = DailySummaryReport()
        try:
            registry = await self._connections.registry()
            tenants = await registry.list_active_tenants()
        except DatabaseUnavailableError as e:
            report.registry_error = str(e)
            logger.error(f"{DAILY_SUMMARY}: cannot list hotels: {e}")
            return report

        for tenant in tenants:
            if self._stopping:
                break
            try:
                context = await self._directory.resolve(tenant.tenant_id)
                report.summaries.append(await self._summarize_tenant(tenant, context, now))
            except Exception as e:
                report.tenant_errors[tenant.tenant_id] = str(e)
                logger.error(f"Daily summary failed for hotel {tenant.tenant_id}: {e}")

        for summary in report.summaries:
            logger.info(
                f"Daily summary for {summary.tenant_id} on {summary.day}: "
                f"{summary.total_bills} bills, revenue {summary.total_revenue}, "
                f"outstanding {summary.total_outstanding}, {summary.active_guests} guests in house"
            )
        if report.tenant_errors:
            logger.warning(f"Daily summary completed with {len(report.tenant_errors)} tenant error(s)")
        return report

    async def _summarize_tenant(
        self, tenant: TenantRecord, context: TenantContext, now: datetime
    ) -> DailyBillingSummary:
        tz_name = tenant.policy.timezone
        start, end = local_day_bounds(now, tz_name)
        totals = await context.models.bills.summarize_created_between(start, end)
        active_guests = await context.models.stays.count_checked_in()
        return DailyBillingSummary(
            tenant_id=tenant.tenant_id,
            day=to_local(now, tz_name).date(),
            total_bills=totals.total_bills,
            total_revenue=totals.total_revenue,
            total_paid=totals.total_paid,
            total_outstanding=totals.total_outstanding,
            active_guests=active_guests,
        )

    async def _reconcile_pass(self, task_name: str, load_stays: StayLoader) -> PassReport:
        now = self._clock()
        report = PassReport(task_name=task_name, started_at=now)

        try:
            registry = await self._connections.registry()
            tenants = await registry.list_active_tenants()
        except DatabaseUnavailableError as e:
            report.registry_error = str(e)
            tenants = []
            logger.error(f"{task_name}: cannot list hotels: {e}")

        report.tenants_total = len(tenants)
        for tenant in tenants:
            if self._stopping:
                report.stopped_early = True
                break
            await self._reconcile_tenant(tenant, load_stays, now, report)

        report.finished_at = self._clock()
        error = report.as_error()
        if error is not None:
            logger.warning(f"{error.message} {error.details}")
        else:
            logger.info(
                f"{task_name}: updated {report.stays_updated} stay(s) "
                f"across {report.tenants_processed} hotel(s)"
            )
        return report

    async def _reconcile_tenant(
        self,
        tenant: TenantRecord,
        load_stays: StayLoader,
        now: datetime,
        report: PassReport,
    ) -> None:
        tenant_id = tenant.tenant_id
        try:
            context = await self._directory.resolve(tenant_id)
            stays = await load_stays(context.models, now)
        except Exception as e:
            report.record_tenant_error(tenant_id, e)
            logger.error(f"Skipping hotel {tenant_id}: {e}")
            return

        report.tenants_processed += 1
        for stay in stays:
            if self._stopping:
                report.stopped_early = True
                return
            report.stays_processed += 1
            try:
                await self._reconcile_stay(context, tenant.policy, stay, now)
                report.stays_updated += 1
            except InvariantViolationError as e:
                report.record_stay_error(tenant_id, stay.id, e)
                logger.warning(f"Hotel {tenant_id}, stay {stay.id}: {e}")
            except Exception as e:
                report.record_stay_error(tenant_id, stay.id, e)
                logger.error(f"Hotel {tenant_id}, stay {stay.id}: reconciliation failed: {e}")

    async def _reconcile_stay(
        self, context: TenantContext, policy: BillingPolicy, stay: Stay, now: datetime
    ) -> None:
        models = context.models
        room = await models.rooms.get(stay.room_id)
        if room is None:
            raise InvariantViolationError(
                f"Room {stay.room_id} not found for stay {stay.id}", stay_id=stay.id
            )
        bill = await models.bills.find_open_for_stay(stay.id)
        if bill is None:
            raise InvariantViolationError(f"No open bill for stay {stay.id}", stay_id=stay.id)
        await self._reconciler.reconcile(bill, stay, room, policy, now, models.bills)

    def _monitored(self, job_name: str, body: Callable[[], Awaitable[Any]]) -> Callable[[], Awaitable[Any]]:
        """Wrap a pass so every run is recorded by the job monitor."""

        async def run() -> Any:
            started_at = self._clock()
            try:
                result = await body()
            except Exception:
                self._monitor.record(job_name, started_at, self._clock(), success=False, errors=1)
                raise
            # PassReport and DailySummaryReport
            self._monitor.record(
                job_name,
                started_at,
                self._clock(),
                success=not result.has_failures,
                records_processed=result.records_processed,
                errors=result.error_count,
            )
            return result

        return run
