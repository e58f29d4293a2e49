# backend/taskboard/services/manual_reset_service.py
"""
Manual Reset Service - the "reset recurring tasks" action of the board.

Runs the same per-task reset as the scheduled job (shared calculator, mirror
resolver and propagation), but for one user at a time and in that user's
timezone. Every call appends one activity_log row with the counts.

Tasks tagged as daily-board copies are not reset on their own here; they are
reached through their source task's mirror class.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..constants import DEFAULT_USER_TIMEZONE, MIRROR_DAILY_TAG
from ..database.activity_log_operations import ActivityLogOperations
from ..database.exceptions import ActivityLogOperationError, DatabaseOperationError
from ..database.task_operations import TaskOperations
from ..database.user_settings_operations import UserSettingsOperations
from ..enums import ActivityAction, JobState, LogEmoji, LoggerName, LogSource, ResetTrigger
from ..exceptions import TaskNotFoundError
from ..models.reset_run_model import RunSummary
from ..utils.time_utils import utc_now
from .logger import get_service_logger
from .recurrence import (
    MirrorGraphResolver,
    ProcessedTaskRegistry,
    RecurrenceCalculator,
    RecurrenceResetProcessor,
)

manual_reset_logger = get_service_logger(
    LoggerName.MANUAL_RESET_SERVICE, LogSource.SERVICE, LogEmoji.USER
)


class ManualResetService:
    """User-triggered recurring task resets."""

    def __init__(
        self,
        task_ops: TaskOperations,
        user_settings_ops: UserSettingsOperations,
        activity_ops: ActivityLogOperations,
        calculator: Optional[RecurrenceCalculator] = None,
        resolver: Optional[MirrorGraphResolver] = None,
        default_timezone: str = DEFAULT_USER_TIMEZONE,
        now_provider: Callable[[], datetime] = utc_now,
    ):
        self.task_ops = task_ops
        self.user_settings_ops = user_settings_ops
        self.activity_ops = activity_ops
        self.processor = RecurrenceResetProcessor(
            task_ops,
            calculator=calculator,
            resolver=resolver or MirrorGraphResolver(task_ops),
        )
        self.default_timezone = default_timezone
        self.now_provider = now_provider

    async def reset_completed_recurring_tasks(
        self, user_id: str, column_id: Optional[str] = None
    ) -> RunSummary:
        """
        Reset a user's completed recurring tasks.

        Args:
            user_id: Owner whose tasks are reset
            column_id: Only reset tasks in this board column when given

        Returns:
            RunSummary for the batch (FAILED if the tasks could not be loaded)
        """
        summary = RunSummary(
            trigger=ResetTrigger.MANUAL, status=JobState.FETCHING, started_at=utc_now()
        )

        try:
            tasks = await self.task_ops.get_completed_recurring_tasks_for_user(
                user_id, column_id
            )
            timezone = await self._get_user_timezone(user_id)
        except DatabaseOperationError as e:
            manual_reset_logger.error(
                f"Could not load recurring tasks for user {user_id}: {e}", exception=e
            )
            return self._finish(summary, JobState.FAILED, error_message=str(e))

        candidates = [task for task in tasks if MIRROR_DAILY_TAG not in task.tags]
        summary.candidates = len(candidates)
        summary.status = JobState.PROCESSING

        registry = ProcessedTaskRegistry()
        reference = self.now_provider()
        for task in candidates:
            await self.processor.process_task(task, timezone, registry, summary, at=reference)

        self._finish(summary, JobState.COMPLETED)
        await self._log_activity(user_id, summary, {"column_id": column_id})
        return summary

    async def reset_task(self, task_id: str) -> RunSummary:
        """
        Reset a single recurring task and its mirrors, whatever its completion state.

        Raises:
            TaskNotFoundError: If no task has this id
        """
        summary = RunSummary(
            trigger=ResetTrigger.MANUAL, status=JobState.FETCHING, started_at=utc_now()
        )

        try:
            task = await self.task_ops.get_task_by_id(task_id)
        except DatabaseOperationError as e:
            manual_reset_logger.error(f"Could not load task {task_id}: {e}", exception=e)
            return self._finish(summary, JobState.FAILED, error_message=str(e))

        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")

        try:
            timezone = await self._get_user_timezone(task.owner_id)
        except DatabaseOperationError as e:
            manual_reset_logger.error(
                f"Could not load timezone for user {task.owner_id}: {e}", exception=e
            )
            return self._finish(summary, JobState.FAILED, error_message=str(e))

        summary.candidates = 1
        summary.status = JobState.PROCESSING
        await self.processor.process_task(
            task,
            timezone,
            ProcessedTaskRegistry(),
            summary,
            at=self.now_provider(),
            require_completed=False,
        )

        self._finish(summary, JobState.COMPLETED)
        await self._log_activity(task.owner_id, summary, {"task_id": task_id})
        return summary

    async def _get_user_timezone(self, user_id: str) -> str:
        timezones = await self.user_settings_ops.get_timezones([user_id])
        return timezones.get(user_id) or self.default_timezone

    def _finish(
        self, summary: RunSummary, status: JobState, error_message: Optional[str] = None
    ) -> RunSummary:
        summary.status = status
        summary.error_message = error_message
        summary.finished_at = utc_now()
        if status == JobState.COMPLETED:
            manual_reset_logger.info(summary.message, emoji=LogEmoji.COMPLETED)
        return summary

    async def _log_activity(
        self, user_id: str, summary: RunSummary, extra: Dict[str, Any]
    ) -> None:
        details = {
            "processed": summary.processed,
            "mirrors_updated": summary.mirrors_updated,
            "errors": summary.errors,
            "skipped": summary.skipped,
            **extra,
        }
        try:
            await self.activity_ops.log_activity(
                user_id, ActivityAction.RECURRENT_RESET, details
            )
        except ActivityLogOperationError as e:
            manual_reset_logger.warning(
                f"Reset done but activity log write failed for user {user_id}: {e}"
            )
