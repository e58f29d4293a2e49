# backend/taskboard/workers/scheduler_worker.py
"""
Scheduler Worker - decides WHEN the recurrence reset runs.

APScheduler's AsyncIOScheduler fires a CronTrigger once a day at the
configured local time. The RecurrenceResetJob decides nothing about timing;
it only runs when the scheduler (or run_now()) asks it to.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ..constants import (
    DEFAULT_RESET_SCHEDULE_HOUR,
    DEFAULT_RESET_SCHEDULE_MINUTE,
    DEFAULT_USER_TIMEZONE,
    RESET_JOB_ID,
    SCHEDULER_MAX_INSTANCES,
    SCHEDULER_MISFIRE_GRACE_SECONDS,
)
from ..enums import LogEmoji, LoggerName, ResetTrigger, WorkerType
from ..exceptions import InvalidTimezoneError
from ..models.reset_run_model import RunSummary
from ..utils.timezone_utils import ZoneInfoDatabase
from .base_worker import BaseWorker
from .exceptions import ResetJobError, WorkerInitializationError
from .recurrence_reset_job import RecurrenceResetJob


class SchedulerWorker(BaseWorker):
    """
    Owns the APScheduler instance and the daily reset job.

    Responsibilities:
    - APScheduler lifecycle management
    - Registering the daily reset at hour:minute in the configured zone
    - Preventing overlapping runs (max_instances=1, coalesce, run lock)
    """

    def __init__(
        self,
        reset_job: RecurrenceResetJob,
        hour: int = DEFAULT_RESET_SCHEDULE_HOUR,
        minute: int = DEFAULT_RESET_SCHEDULE_MINUTE,
        timezone: str = DEFAULT_USER_TIMEZONE,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        """
        Args:
            reset_job: Job executed on every trigger
            hour: Local hour of the daily run
            minute: Local minute of the daily run
            timezone: IANA zone the hour and minute are expressed in
            scheduler: Scheduler instance (one is created when omitted)
        """
        super().__init__(WorkerType.SCHEDULER_WORKER.value, LoggerName.SCHEDULER_WORKER)

        self.reset_job = reset_job
        self.hour = hour
        self.minute = minute
        self.timezone = timezone
        self.scheduler = scheduler or AsyncIOScheduler()
        self.job: Optional[Job] = None
        self._run_in_progress = False

    @classmethod
    def from_settings(cls, reset_job: RecurrenceResetJob, settings) -> "SchedulerWorker":
        return cls(
            reset_job,
            hour=settings.reset_schedule_hour,
            minute=settings.reset_schedule_minute,
            timezone=settings.reset_schedule_timezone,
        )

    async def initialize(self) -> None:
        """Register the daily reset and start the scheduler."""
        try:
            self.job = self.add_reset_job()
        except InvalidTimezoneError as e:
            raise WorkerInitializationError(
                f"Cannot schedule reset in timezone '{self.timezone}'"
            ) from e

        self.start_scheduler()
        await self.reset_job.start()
        self.log_info(
            f"Daily reset scheduled at {self.hour:02d}:{self.minute:02d} {self.timezone}, "
            f"next run {self.next_run_time}",
            emoji=LogEmoji.SCHEDULER,
        )

    async def cleanup(self) -> None:
        """Stop the scheduler without waiting for a running reset."""
        self.stop_scheduler()
        await self.reset_job.stop()

    # APScheduler Management

    def start_scheduler(self) -> None:
        """Start the APScheduler instance."""
        if not self.scheduler.running:
            self.scheduler.start()
            self.log_info("Scheduler started", emoji=LogEmoji.SUCCESS)
        else:
            self.log_debug("Scheduler already running")

    def stop_scheduler(self) -> None:
        """Stop the APScheduler instance."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            self.log_info("Scheduler stopped", emoji=LogEmoji.SHUTDOWN)
        else:
            self.log_debug("Scheduler already stopped")

    def build_trigger(self) -> CronTrigger:
        """Daily cron trigger at the configured local time."""
        zone = ZoneInfoDatabase().resolve(self.timezone)
        return CronTrigger(hour=self.hour, minute=self.minute, timezone=zone)

    def add_reset_job(self) -> Job:
        """
        Register the daily reset, replacing a previous registration.

        Returns:
            The APScheduler job
        """
        return self.scheduler.add_job(
            func=self._scheduled_reset,
            trigger=self.build_trigger(),
            id=RESET_JOB_ID,
            replace_existing=True,
            max_instances=SCHEDULER_MAX_INSTANCES,
            coalesce=True,
            misfire_grace_time=SCHEDULER_MISFIRE_GRACE_SECONDS,
        )

    async def _scheduled_reset(self) -> Optional[RunSummary]:
        if self._run_in_progress:
            self.log_warning("Previous reset still running, skipping this trigger")
            return None
        return await self._run(ResetTrigger.SCHEDULED)

    async def run_now(self) -> RunSummary:
        """
        Run the reset immediately, outside the daily schedule.

        Raises:
            ResetJobError: If a reset is already in progress
        """
        if self._run_in_progress:
            raise ResetJobError("A recurrence reset is already running")
        return await self._run(ResetTrigger.MANUAL)

    async def _run(self, trigger: ResetTrigger) -> RunSummary:
        self._run_in_progress = True
        try:
            return await self.reset_job.run(trigger=trigger)
        finally:
            self._run_in_progress = False

    @property
    def next_run_time(self) -> Optional[datetime]:
        if self.job is None:
            return None
        return getattr(self.job, "next_run_time", None)

    def get_status(self) -> Dict[str, Any]:
        """Scheduler worker status for the CLI and health reporting."""
        status = super().get_status()
        status.update(
            {
                "scheduler_running": self.scheduler.running,
                "schedule": f"{self.hour:02d}:{self.minute:02d} {self.timezone}",
                "next_run_time": self.next_run_time,
                "run_in_progress": self._run_in_progress,
                "reset_job": self.reset_job.get_status(),
            }
        )
        return status
