"""Job monitoring for scheduled passes.

Keeps per-job run counters and durations in memory and derives a simple
health verdict from success rate and recency.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from ....utils.timezone import utc_now

logger = logging.getLogger(__name__)

SLOW_RUN_SECONDS = 30.0
HEALTHY_SUCCESS_RATE = 95.0
MIN_HEALTH_WINDOW = timedelta(hours=1)


@dataclass
class JobStats:
    """Accumulated statistics for one job."""

    interval_seconds: Optional[float] = None
    total_runs: int = 0
    successful_runs: int = 0
    failed_runs: int = 0
    total_duration: float = 0.0
    last_duration: float = 0.0
    total_records_processed: int = 0
    total_errors: int = 0
    last_run: Optional[datetime] = None
    last_success: Optional[bool] = None

    @property
    def average_duration(self) -> float:
        return self.total_duration / self.total_runs if self.total_runs else 0.0

    @property
    def success_rate(self) -> float:
        return self.successful_runs / self.total_runs * 100 if self.total_runs else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval_seconds": self.interval_seconds,
            "total_runs": self.total_runs,
            "successful_runs": self.successful_runs,
            "failed_runs": self.failed_runs,
            "average_duration": round(self.average_duration, 3),
            "last_duration": round(self.last_duration, 3),
            "total_records_processed": self.total_records_processed,
            "total_errors": self.total_errors,
            "last_run": self.last_run.isoformat() if self.last_run else None,
            "last_success": self.last_success,
            "success_rate": round(self.success_rate, 2),
        }


class JobMonitor:
    """Tracks runs of named jobs."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._jobs: Dict[str, JobStats] = {}

    def register(self, job_name: str, interval_seconds: float) -> None:
        """Declare a job's interval for the recency check."""
        self._jobs.setdefault(job_name, JobStats()).interval_seconds = interval_seconds

    def record(
        self,
        job_name: str,
        started_at: datetime,
        finished_at: datetime,
        success: bool,
        records_processed: int = 0,
        errors: int = 0,
    ) -> JobStats:
        """Record one completed run."""
        stats = self._jobs.setdefault(job_name, JobStats())
        duration = (finished_at - started_at).total_seconds()

        stats.total_runs += 1
        if success:
            stats.successful_runs += 1
        else:
            stats.failed_runs += 1
        stats.total_duration += duration
        stats.last_duration = duration
        stats.total_records_processed += records_processed
        stats.total_errors += errors
        stats.last_run = finished_at
        stats.last_success = success

        if duration > SLOW_RUN_SECONDS:
            logger.warning(f"Job {job_name} took {duration:.1f}s, longer than {SLOW_RUN_SECONDS:.0f}s")
        return stats

    def stats(self, job_name: str) -> Optional[JobStats]:
        return self._jobs.get(job_name)

    def all_stats(self) -> Dict[str, Dict[str, Any]]:
        return {name: stats.to_dict() for name, stats in self._jobs.items()}

    def health(self) -> Dict[str, Dict[str, Any]]:
        """Health of every job that has run at least once."""
        now = self._clock()
        report = {}
        for name, stats in self._jobs.items():
            if stats.last_run is None:
                continue
            window = MIN_HEALTH_WINDOW
            if stats.interval_seconds:
                window = max(window, timedelta(seconds=2 * stats.interval_seconds))
            since_last = now - stats.last_run
            report[name] = {
                "is_healthy": stats.success_rate >= HEALTHY_SUCCESS_RATE and since_last < window,
                "success_rate": round(stats.success_rate, 2),
                "seconds_since_last_run": since_last.total_seconds(),
                "average_duration": round(stats.average_duration, 3),
                "total_runs": stats.total_runs,
            }
        return report
