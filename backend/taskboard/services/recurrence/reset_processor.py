# backend/taskboard/services/recurrence/reset_processor.py
"""
Reset Processor - resets one completed recurring task and its mirrors.

Used by both the scheduled reset job and the interactive reset service, so
the two paths share the date math, the completion guard and the mirror
propagation rules.

Per task:
1. compute the next due date from the pre-update snapshot
2. resolve the mirror class and claim it in the run's ProcessedTaskRegistry
   in one step (task already claimed -> skipped)
3. write {is_completed=false, due_date, updated_at} in one statement
4. write the same pair to every mirror claimed in step 2

Within a run, a class claimed by one primary is written only by that primary
and every member ends with its due date.

A failed mirror write never undoes the primary write; the mirror stays stale
until a later reset reaches it.
"""

import asyncio
from datetime import datetime
from typing import Iterable, Optional, Set

from ...database.exceptions import TaskOperationError
from ...database.task_operations import TaskOperations
from ...enums import LogEmoji, LoggerName, LogSource
from ...models.reset_run_model import RunSummary
from ...models.task_model import Task
from ...services.logger import get_service_logger
from ...utils.time_utils import format_iso_utc
from .mirror_resolver import MirrorGraphResolver
from .recurrence_calculator import RecurrenceCalculator, describe_rule

recurrence_logger = get_service_logger(
    LoggerName.RECURRENCE_SERVICE, LogSource.SERVICE, LogEmoji.TASK
)


class ProcessedTaskRegistry:
    """
    Ids written during one run.

    Created per run and passed through every processing call. Claims are
    lock-guarded so two concurrent tasks sharing a mirror never both write it.
    """

    def __init__(self) -> None:
        self._claimed: Set[str] = set()
        self._lock = asyncio.Lock()

    async def claim_class(
        self, task_id: str, mirror_ids: Iterable[str] = ()
    ) -> Optional[Set[str]]:
        """
        Claim a task together with its mirrors.

        Returns:
            None when the task itself was already claimed in this run,
            otherwise the mirror ids newly claimed for it
        """
        async with self._lock:
            if task_id in self._claimed:
                return None
            self._claimed.add(task_id)
            claimed = {mirror_id for mirror_id in mirror_ids if mirror_id not in self._claimed}
            self._claimed.update(claimed)
            return claimed

    async def release(self, *task_ids: str) -> None:
        """Give claims back after a failed write so a later step may retry them."""
        async with self._lock:
            self._claimed.difference_update(task_ids)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)


class RecurrenceResetProcessor:
    """Applies one reset (primary plus mirrors) and records it on a RunSummary."""

    def __init__(
        self,
        task_ops: TaskOperations,
        calculator: Optional[RecurrenceCalculator] = None,
        resolver: Optional[MirrorGraphResolver] = None,
    ):
        self.task_ops = task_ops
        self.calculator = calculator or RecurrenceCalculator()
        self.resolver = resolver or MirrorGraphResolver(task_ops)

    async def process_task(
        self,
        task: Task,
        timezone: str,
        registry: ProcessedTaskRegistry,
        summary: RunSummary,
        at: Optional[datetime] = None,
        require_completed: bool = True,
    ) -> bool:
        """
        Reset a task and propagate the reset to its mirror class.

        Failures are counted on the summary and never raised, so one bad row
        cannot stop the rest of a batch.

        Args:
            task: Snapshot of the task as loaded for this run
            timezone: Owner's timezone
            registry: Ids already written in this run
            summary: Counters updated in place
            at: Reference instant pinned for the run
            require_completed: Only write the primary while it is still completed

        Returns:
            True if the primary row was reset
        """
        if task.id in registry:
            self._skip_claimed(task, summary)
            return False

        try:
            next_due = self.calculator.next_due(
                task.due_date, task.recurrence_rule, timezone, at
            )
        except (ValueError, TypeError, OverflowError) as e:
            # e.g. a due date the calendar cannot represent after the shift
            summary.errors += 1
            recurrence_logger.error(
                f"Could not compute next due date of task {task.id}: {e}",
                exception=e,
                error_context={"task_id": task.id, "owner_id": task.owner_id},
            )
            return False

        mirror_ids = await self._resolve_mirrors(task, summary)
        claimed_mirrors = await registry.claim_class(task.id, mirror_ids)
        if claimed_mirrors is None:
            self._skip_claimed(task, summary)
            return False

        try:
            updated = await self.task_ops.reset_task(
                task.id, next_due, require_completed=require_completed
            )
        except TaskOperationError as e:
            summary.errors += 1
            await registry.release(task.id, *claimed_mirrors)
            recurrence_logger.error(
                f"Failed to reset task {task.id}: {e}",
                exception=e,
                error_context={"task_id": task.id, "owner_id": task.owner_id},
            )
            return False

        if not updated:
            summary.skipped += 1
            await registry.release(*claimed_mirrors)
            recurrence_logger.debug(
                f"Task {task.id} no longer completed, left untouched",
                emoji=LogEmoji.SKIPPED,
            )
            return False

        summary.processed += 1
        recurrence_logger.info(
            f"Task {task.id}: {format_iso_utc(task.due_date) or 'no due date'} -> "
            f"{format_iso_utc(next_due)} ({describe_rule(task.recurrence_rule)}, {timezone})",
            extra_context={"task_id": task.id, "owner_id": task.owner_id},
        )

        await self._reset_mirrors(task.id, sorted(claimed_mirrors), next_due, registry, summary)
        return True

    @staticmethod
    def _skip_claimed(task: Task, summary: RunSummary) -> None:
        summary.skipped += 1
        recurrence_logger.debug(
            f"Task {task.id} already reset as a mirror in this run",
            emoji=LogEmoji.SKIPPED,
        )

    async def _resolve_mirrors(self, task: Task, summary: RunSummary) -> Set[str]:
        """Mirror class of the task; empty (and one error counted) when the lookup fails."""
        try:
            return await self.resolver.resolve_class(task)
        except TaskOperationError as e:
            summary.errors += 1
            recurrence_logger.error(
                f"Failed to resolve mirrors of task {task.id}: {e}",
                exception=e,
                error_context={"task_id": task.id},
            )
            return set()

    async def _reset_mirrors(
        self,
        source_id: str,
        mirror_ids: Iterable[str],
        next_due: datetime,
        registry: ProcessedTaskRegistry,
        summary: RunSummary,
    ) -> None:
        for mirror_id in mirror_ids:
            try:
                updated = await self.task_ops.reset_task(
                    mirror_id, next_due, require_completed=False
                )
            except TaskOperationError as e:
                summary.errors += 1
                await registry.release(mirror_id)
                recurrence_logger.error(
                    f"Failed to reset mirror {mirror_id} of task {source_id}: {e}",
                    exception=e,
                    error_context={"task_id": source_id, "mirror_id": mirror_id},
                )
                continue

            if updated:
                summary.mirrors_updated += 1
                recurrence_logger.debug(
                    f"Mirror {mirror_id} of task {source_id} reset",
                    emoji=LogEmoji.MIRROR,
                )
            else:
                recurrence_logger.warning(
                    f"Mirror {mirror_id} of task {source_id} does not exist",
                    emoji=LogEmoji.MIRROR,
                )
