# ABOUTME: In-process cron scheduler for newsletter runs.
# ABOUTME: Fires an async job on a cron expression, optionally once at start, never overlapping.

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from zoneinfo import ZoneInfo

import structlog
from croniter import croniter

from translated_newsletter.errors import ConfigError

log = structlog.get_logger()


class NewsletterScheduler:
    """Runs a job on a recurring cron schedule."""

    def __init__(
        self,
        job: Callable[[], Awaitable[object]],
        cron_expression: str,
        *,
        timezone: str = "UTC",
        run_on_start: bool = False,
    ) -> None:
        if not croniter.is_valid(cron_expression):
            raise ConfigError(f"Invalid schedule cron expression: {cron_expression!r}")
        self.job = job
        self.cron_expression = cron_expression
        self.timezone = ZoneInfo(timezone)
        self.run_on_start = run_on_start
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    def next_run(self, now: datetime | None = None) -> datetime:
        """Next fire time strictly after now."""
        now = now or datetime.now(self.timezone)
        return croniter(self.cron_expression, now).get_next(datetime)

    def start(self) -> None:
        if self._task is None:
            log.info("scheduler_started", cron=self.cron_expression, timezone=str(self.timezone))
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            log.info("scheduler_stopped")

    async def trigger(self) -> bool:
        """Run the job now unless a run is in progress. Returns False when skipped."""
        if self._lock.locked():
            log.warning("scheduled_run_skipped", reason="previous run still in progress")
            return False

        async with self._lock:
            try:
                await self.job()
            except Exception:
                log.exception("scheduled_run_failed")
        return True

    async def _loop(self) -> None:
        if self.run_on_start:
            await self.trigger()

        while True:
            now = datetime.now(self.timezone)
            fire_at = self.next_run(now)
            log.info("next_run_scheduled", at=fire_at.isoformat())
            await asyncio.sleep((fire_at - now).total_seconds())
            await self.trigger()
