"""
Single-flight daily scheduler for the archive-and-retrain job.

A background loop sleeps until the next local HH:MM, runs the job and
goes back to sleep. A run that is still in progress when another one is
requested (a manual trigger overlapping the timer, say) causes the new
one to be skipped. Job failures are logged and never stop the loop.
"""
import asyncio
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Optional

from backend.utils.logger import get_logger

logger = get_logger(__name__)


def seconds_until(hour: int, minute: int, now: Optional[datetime] = None) -> float:
    """Seconds from `now` to the next local occurrence of hour:minute"""
    now = now or datetime.now()
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class DailyJobScheduler:
    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        hour: int = 0,
        minute: int = 0,
        name: str = "daily-job",
    ):
        self.job = job
        self.hour = hour
        self.minute = minute
        self.name = name
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        """True while a job run is in progress"""
        return self._running

    async def run_once(self) -> bool:
        """Run the job unless a run is already in progress. Returns whether it ran."""
        if self._running:
            logger.warning(f"{self.name}: previous run still in progress, skipping")
            return False

        self._running = True
        try:
            result = await self.job()
            logger.info(f"{self.name} finished: {result}")
        except Exception as e:
            logger.exception(f"{self.name} failed: {e}")
        finally:
            self._running = False
        return True

    async def _loop(self):
        logger.info(f"{self.name} scheduled daily at {self.hour:02d}:{self.minute:02d}")
        while True:
            await asyncio.sleep(seconds_until(self.hour, self.minute))
            await self.run_once()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._loop())
        return self._task

    async def stop(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
