# backend/taskboard/workers/recurrence_reset_job.py
"""
Recurrence Reset Job - the daily batch that re-opens completed recurring tasks.

One run:

    FETCHING    load every completed task with a recurrence rule and the
                timezone preference of each distinct owner (one bulk read)
    PROCESSING  reset each candidate in a bounded pool of asyncio tasks,
                against a reference instant pinned once for the run
    COMPLETED   summary returned with the counts
    FAILED      loading failed (nothing was written) or the deadline elapsed

A run keeps no state between invocations; a second run right after a
successful one finds no candidates because every reset row is no longer
completed.

Candidates are not ordered. When two candidates share mirrors and are
processed concurrently, the first to claim a mirror writes it.
"""

import asyncio
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..constants import (
    DEFAULT_RESET_DEADLINE_SECONDS,
    DEFAULT_RESET_MAX_CONCURRENCY,
    DEFAULT_USER_TIMEZONE,
    RESET_DEADLINE_EXCEEDED_MESSAGE,
)
from ..database.core import AsyncDatabase
from ..database.exceptions import DatabaseOperationError
from ..database.task_operations import TaskOperations
from ..database.user_settings_operations import UserSettingsOperations
from ..enums import JobState, LogEmoji, LoggerName, ResetTrigger, WorkerType
from ..models.reset_run_model import RunSummary
from ..models.task_model import Task
from ..services.recurrence import (
    MirrorGraphResolver,
    ProcessedTaskRegistry,
    RecurrenceCalculator,
    RecurrenceResetProcessor,
)
from ..utils.time_utils import ensure_utc, utc_now
from ..utils.timezone_utils import TimezoneClock
from .base_worker import BaseWorker
from .exceptions import ResetJobError


class RecurrenceResetJob(BaseWorker):
    """
    Resets every completed recurring task and its mirrors.

    The job holds no per-run state; run() may be called repeatedly on the
    same instance, but the scheduler never starts two runs at once.
    """

    def __init__(
        self,
        task_ops: TaskOperations,
        user_settings_ops: UserSettingsOperations,
        calculator: Optional[RecurrenceCalculator] = None,
        resolver: Optional[MirrorGraphResolver] = None,
        max_concurrency: int = DEFAULT_RESET_MAX_CONCURRENCY,
        deadline_seconds: Optional[float] = DEFAULT_RESET_DEADLINE_SECONDS,
        default_timezone: str = DEFAULT_USER_TIMEZONE,
        now_provider: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            task_ops: Task store
            user_settings_ops: Preference store
            calculator: Next due date calculator (defaults to a system clock one)
            resolver: Mirror class resolver (defaults to one over task_ops)
            max_concurrency: Candidates processed at the same time
            deadline_seconds: Default time budget of a run (None disables)
            default_timezone: Zone for owners without a stored preference
            now_provider: Source of the run's reference instant
        """
        super().__init__(
            WorkerType.RECURRENCE_RESET_WORKER.value, LoggerName.RECURRENCE_RESET_JOB
        )

        if max_concurrency < 1:
            raise ResetJobError(f"max_concurrency must be at least 1, got {max_concurrency}")

        self.task_ops = task_ops
        self.user_settings_ops = user_settings_ops
        self.calculator = calculator or RecurrenceCalculator(
            TimezoneClock(now_provider=now_provider)
        )
        self.processor = RecurrenceResetProcessor(
            task_ops,
            calculator=self.calculator,
            resolver=resolver or MirrorGraphResolver(task_ops),
        )
        self.max_concurrency = max_concurrency
        self.deadline_seconds = deadline_seconds
        self.default_timezone = default_timezone
        self.now_provider = now_provider

        self.last_summary: Optional[RunSummary] = None

    @classmethod
    def from_database(cls, db: AsyncDatabase, settings) -> "RecurrenceResetJob":
        """Build a job wired to the database with values from Settings."""
        return cls(
            task_ops=TaskOperations(db),
            user_settings_ops=UserSettingsOperations(db),
            max_concurrency=settings.reset_max_concurrency,
            deadline_seconds=settings.reset_deadline_seconds,
            default_timezone=settings.default_user_timezone,
        )

    async def initialize(self) -> None:
        """Nothing to prepare; the database is owned by the caller."""
        self.log_debug(
            f"Ready (concurrency={self.max_concurrency}, deadline={self.deadline_seconds}s)"
        )

    async def cleanup(self) -> None:
        """Nothing to release."""
        pass

    async def run(
        self,
        deadline_seconds: Optional[float] = None,
        trigger: ResetTrigger = ResetTrigger.SCHEDULED,
    ) -> RunSummary:
        """
        Execute one reset pass.

        Args:
            deadline_seconds: Time budget for this run; falls back to the
                job's configured deadline
            trigger: What started the run, recorded on the summary

        Returns:
            RunSummary with status COMPLETED or FAILED
        """
        summary = RunSummary(trigger=trigger, status=JobState.FETCHING, started_at=utc_now())
        self.log_info(f"Recurring task reset started ({trigger.value})", emoji=LogEmoji.STARTUP)

        try:
            candidates = await self.task_ops.get_completed_recurring_tasks()
            timezones = await self._load_timezones(candidates)
        except DatabaseOperationError as e:
            return self._finish(summary, JobState.FAILED, error_message=str(e), error=e)

        summary.candidates = len(candidates)
        if not candidates:
            return self._finish(summary, JobState.COMPLETED)

        summary.status = JobState.PROCESSING
        reference = ensure_utc(self.now_provider())
        registry = ProcessedTaskRegistry()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def reset_one(task: Task) -> None:
            async with semaphore:
                await self._process_candidate(task, timezones, registry, summary, reference)

        deadline = deadline_seconds if deadline_seconds is not None else self.deadline_seconds
        try:
            async with asyncio.timeout(deadline):
                await asyncio.gather(*(reset_one(task) for task in candidates))
        except TimeoutError:
            return self._finish(
                summary, JobState.FAILED, error_message=RESET_DEADLINE_EXCEEDED_MESSAGE
            )

        return self._finish(summary, JobState.COMPLETED)

    async def _load_timezones(self, candidates: List[Task]) -> Dict[str, str]:
        """Timezone per distinct owner, with the default applied to missing ones."""
        owner_ids = {task.owner_id for task in candidates}
        if not owner_ids:
            return {}

        stored = await self.user_settings_ops.get_timezones(owner_ids)
        return {
            owner_id: stored.get(owner_id) or self.default_timezone
            for owner_id in owner_ids
        }

    async def _process_candidate(
        self,
        task: Task,
        timezones: Dict[str, str],
        registry: ProcessedTaskRegistry,
        summary: RunSummary,
        reference: datetime,
    ) -> None:
        timezone = timezones.get(task.owner_id, self.default_timezone)
        await self.processor.process_task(task, timezone, registry, summary, at=reference)

    def _finish(
        self,
        summary: RunSummary,
        status: JobState,
        error_message: Optional[str] = None,
        error: Optional[Exception] = None,
    ) -> RunSummary:
        summary.status = status
        summary.error_message = error_message
        summary.finished_at = utc_now()
        self.last_summary = summary

        if status == JobState.FAILED:
            self.log_error(summary.message, error)
        else:
            self.log_info(summary.message, emoji=LogEmoji.COMPLETED)
        self.logger.debug("Run summary", extra_context=summary.to_log_dict(), emoji=LogEmoji.CHART)
        return summary

    def get_status(self):
        status = super().get_status()
        status["last_run"] = self.last_summary.to_log_dict() if self.last_summary else None
        return status
