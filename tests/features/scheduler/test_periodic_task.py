"""Tests for periodic tasks."""

import asyncio

import pytest

from hotel_tenancy.config.constants import TaskState
from hotel_tenancy.features.scheduler.services.periodic_task import PeriodicTask


class TestPeriodicTask:

    @pytest.mark.asyncio
    async def test_run_once_returns_result(self):
        async def body():
            return 42

        task = PeriodicTask("answer", 60, body)

        assert await task.run_once() == 42
        assert task.state == TaskState.IDLE
        assert task.runs == 1
        assert task.last_result == 42

    @pytest.mark.asyncio
    async def test_overlapping_tick_is_skipped(self):
        release = asyncio.Event()
        calls = []

        async def body():
            calls.append(1)
            await release.wait()

        task = PeriodicTask("slow", 60, body)

        assert task.tick() is True
        assert task.state == TaskState.RUNNING
        assert task.tick() is False
        assert await task.run_once() is None

        release.set()
        await task.stop()

        assert calls == [1]
        assert task.skipped_ticks == 2
        assert task.state == TaskState.IDLE

    @pytest.mark.asyncio
    async def test_failure_returns_to_idle(self):
        async def body():
            raise RuntimeError("boom")

        task = PeriodicTask("broken", 60, body)

        with pytest.raises(RuntimeError):
            await task.run_once()

        assert task.state == TaskState.IDLE
        assert task.last_error == "boom"

    @pytest.mark.asyncio
    async def test_ticker_runs_and_stops(self):
        ran = asyncio.Event()

        async def body():
            ran.set()

        task = PeriodicTask("fast", 0.01, body)
        task.start()
        task.start()

        await asyncio.wait_for(ran.wait(), timeout=1)
        assert task.is_ticking
        await task.stop()

        assert not task.is_ticking
        assert task.runs >= 1

    @pytest.mark.asyncio
    async def test_stop_waits_for_running_pass(self):
        release = asyncio.Event()
        finished = []

        async def body():
            await release.wait()
            finished.append(True)

        task = PeriodicTask("slow", 60, body)
        task.tick()
        stopper = asyncio.create_task(task.stop())
        await asyncio.sleep(0)
        assert not stopper.done()

        release.set()
        await stopper

        assert finished == [True]

    def test_rejects_non_positive_interval(self):
        async def body():
            return None

        with pytest.raises(ValueError):
            PeriodicTask("bad", 0, body)

    @pytest.mark.asyncio
    async def test_status(self):
        async def body():
            return "done"

        task = PeriodicTask("status", 30, body)
        await task.run_once()

        status = task.status().to_dict()

        assert status["name"] == "status"
        assert status["state"] == "idle"
        assert status["interval_seconds"] == 30
        assert status["runs"] == 1
        assert status["last_result"] == "done"
