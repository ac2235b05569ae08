"""Fixed-interval periodic task.

Each task has a ticker that fires every ``interval_seconds`` and starts a
pass in its own asyncio task. State is ``idle -> running -> idle``; a tick
that finds the previous pass still running is skipped.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from ....config.constants import TaskState
from ....utils.timezone import utc_now
from ..entities.task import TaskStatus

logger = logging.getLogger(__name__)


class PeriodicTask:
    """A named body run on a fixed interval without overlap."""

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        body: Callable[[], Awaitable[Any]],
        clock: Callable[[], datetime] = utc_now,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = interval_seconds
        self._body = body
        self._clock = clock
        self._state = TaskState.IDLE
        self._ticker: Optional[asyncio.Task] = None
        self._current: Optional[asyncio.Task] = None
        self.runs = 0
        self.skipped_ticks = 0
        self.last_started_at: Optional[datetime] = None
        self.last_finished_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.last_result: Any = None

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == TaskState.RUNNING

    @property
    def is_ticking(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def tick(self) -> bool:
        """Start a pass in the background. Returns False if skipped."""
        task = self._start_pass()
        if task is None:
            return False
        task.add_done_callback(self._consume_result)
        return True

    async def run_once(self) -> Optional[Any]:
        """Run a pass now and return its result; None if one is already running."""
        task = self._start_pass()
        if task is None:
            return None
        return await task

    def _start_pass(self) -> Optional[asyncio.Task]:
        if self._state == TaskState.RUNNING:
            self.skipped_ticks += 1
            logger.warning(f"Task {self.name} is still running, skipping this tick")
            return None
        # Flip state before the first await so concurrent callers see it
        self._state = TaskState.RUNNING
        self._current = asyncio.create_task(self._execute(), name=f"pass:{self.name}")
        return self._current

    async def _execute(self) -> Any:
        self.last_started_at = self._clock()
        logger.info(f"Task {self.name} started")
        try:
            result = await self._body()
            self.last_result = result
            self.last_error = None
            return result
        except Exception as e:
            self.last_error = str(e)
            logger.exception(f"Task {self.name} failed: {e}")
            raise
        finally:
            self.runs += 1
            self.last_finished_at = self._clock()
            self._state = TaskState.IDLE
            logger.info(f"Task {self.name} finished")

    @staticmethod
    def _consume_result(task: asyncio.Task) -> None:
        # Already logged in _execute
        if not task.cancelled():
            task.exception()

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.tick()

    def start(self) -> None:
        """Start ticking. No-op if already started."""
        if self.is_ticking:
            return
        self._ticker = asyncio.create_task(self._tick_loop(), name=f"ticker:{self.name}")
        logger.info(f"Task {self.name} scheduled every {self.interval_seconds}s")

    async def stop(self) -> None:
        """Stop ticking and wait for a running pass to finish."""
        if self._ticker is not None:
            self._ticker.cancel()
            try:
                await self._ticker
            except asyncio.CancelledError:
                pass
            self._ticker = None

        current = self._current
        if current is not None and not current.done():
            logger.info(f"Waiting for running pass of {self.name} to finish")
            await asyncio.gather(current, return_exceptions=True)
        self._current = None

    def status(self) -> TaskStatus:
        return TaskStatus(
            name=self.name,
            state=self._state,
            interval_seconds=self.interval_seconds,
            ticking=self.is_ticking,
            runs=self.runs,
            skipped_ticks=self.skipped_ticks,
            last_started_at=self.last_started_at,
            last_finished_at=self.last_finished_at,
            last_error=self.last_error,
            last_result=self.last_result,
        )
