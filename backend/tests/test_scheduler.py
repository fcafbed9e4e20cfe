"""
Daily scheduler tests
"""
import asyncio
from datetime import datetime

from backend.services.scheduler import DailyJobScheduler, seconds_until


def test_seconds_until_later_today():
    now = datetime(2024, 6, 1, 22, 0, 0)
    assert seconds_until(23, 30, now) == 90 * 60


def test_seconds_until_rolls_over_to_tomorrow():
    now = datetime(2024, 6, 1, 0, 0, 0)
    assert seconds_until(0, 0, now) == 24 * 3600
    assert seconds_until(0, 0, datetime(2024, 6, 1, 23, 59, 0)) == 60


async def test_overlapping_run_is_skipped():
    release = asyncio.Event()
    calls = []

    async def job():
        calls.append(1)
        await release.wait()
        return "done"

    scheduler = DailyJobScheduler(job)
    first = asyncio.create_task(scheduler.run_once())
    await asyncio.sleep(0)
    assert scheduler.is_running

    assert await scheduler.run_once() is False

    release.set()
    assert await first is True
    assert calls == [1]
    assert not scheduler.is_running


async def test_failing_job_is_swallowed():
    async def job():
        raise RuntimeError("archive exploded")

    scheduler = DailyJobScheduler(job)
    assert await scheduler.run_once() is True
    assert not scheduler.is_running

    # a later run still happens
    assert await scheduler.run_once() is True


async def test_start_and_stop():
    async def job():
        return None

    scheduler = DailyJobScheduler(job, hour=3, minute=0)
    task = scheduler.start()
    assert scheduler.start() is task

    await scheduler.stop()
    assert task.cancelled() or task.done()
