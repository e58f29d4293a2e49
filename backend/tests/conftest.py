# backend/tests/conftest.py
"""
Pytest configuration and shared fixtures for Taskboard tests.

The in-memory stores implement the same async methods as the *Operations
classes so services and workers can be exercised without PostgreSQL.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

import pytest

from taskboard.database.exceptions import (
    ActivityLogOperationError,
    TaskOperationError,
    UserSettingsOperationError,
)
from taskboard.enums import ActivityAction
from taskboard.models.task_model import Task
from taskboard.services.recurrence import RecurrenceCalculator
from taskboard.utils.timezone_utils import TimezoneClock


class InMemoryTaskStore:
    """Fake TaskOperations backed by a dict of Task models."""

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.tasks: Dict[str, Task] = {task.id: task for task in tasks or []}
        self.fail_load = False
        self.fail_reset_ids: Set[str] = set()
        self.fail_reverse_ids: Set[str] = set()
        self.reset_calls: List[str] = []

    def add(self, **fields) -> Task:
        fields.setdefault("owner_id", "owner-1")
        task = Task(**fields)
        self.tasks[task.id] = task
        return task

    async def get_completed_recurring_tasks(self) -> List[Task]:
        if self.fail_load:
            raise TaskOperationError(
                "Failed to load completed recurring tasks",
                operation="get_completed_recurring_tasks",
            )
        return [
            task
            for task in self.tasks.values()
            if task.is_completed and task.recurrence_rule is not None
        ]

    async def get_completed_recurring_tasks_for_user(
        self, user_id: str, column_id: Optional[str] = None
    ) -> List[Task]:
        candidates = await self.get_completed_recurring_tasks()
        return [
            task
            for task in candidates
            if task.owner_id == user_id and (column_id is None or task.column_id == column_id)
        ]

    async def get_task_by_id(self, task_id: str) -> Optional[Task]:
        return self.tasks.get(task_id)

    async def reset_task(
        self, task_id: str, due_date: datetime, require_completed: bool = False
    ) -> bool:
        self.reset_calls.append(task_id)
        if task_id in self.fail_reset_ids:
            raise TaskOperationError("Failed to reset task", operation="reset_task")

        task = self.tasks.get(task_id)
        if task is None:
            return False
        if require_completed and not task.is_completed:
            return False

        self.tasks[task_id] = task.model_copy(
            update={"is_completed": False, "due_date": due_date}
        )
        return True

    async def get_reverse_mirror_ids(self, task_id: str) -> List[str]:
        if task_id in self.fail_reverse_ids:
            raise TaskOperationError(
                "Failed to get reverse mirrors", operation="get_reverse_mirror_ids"
            )
        return sorted(
            task.id
            for task in self.tasks.values()
            if task.mirror_task_id == task_id and task.id != task_id
        )


class InMemoryUserSettingsStore:
    """Fake UserSettingsOperations."""

    def __init__(self, timezones: Optional[Dict[str, str]] = None):
        self.timezones = dict(timezones or {})
        self.fail = False
        self.calls: List[Set[str]] = []

    async def get_timezones(self, owner_ids: Iterable[str]) -> Dict[str, str]:
        ids = set(owner_ids)
        self.calls.append(ids)
        if self.fail:
            raise UserSettingsOperationError(
                "Failed to load user timezones", operation="get_timezones"
            )
        return {owner_id: tz for owner_id, tz in self.timezones.items() if owner_id in ids}


class InMemoryActivityLog:
    """Fake ActivityLogOperations."""

    def __init__(self):
        self.entries: List[dict] = []
        self.fail = False

    async def log_activity(self, user_id: str, action: ActivityAction, details=None) -> None:
        if self.fail:
            raise ActivityLogOperationError("Failed to write activity log", operation="log_activity")
        self.entries.append({"user_id": user_id, "action": action, "details": details or {}})


@pytest.fixture
def fixed_now() -> datetime:
    """Reference instant used across reset tests (a Friday)."""
    return datetime(2024, 3, 15, 15, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock(fixed_now) -> TimezoneClock:
    return TimezoneClock.frozen_at(fixed_now)


@pytest.fixture
def calculator(fixed_clock) -> RecurrenceCalculator:
    return RecurrenceCalculator(fixed_clock)


@pytest.fixture
def task_store() -> InMemoryTaskStore:
    return InMemoryTaskStore()


@pytest.fixture
def settings_store() -> InMemoryUserSettingsStore:
    return InMemoryUserSettingsStore()


@pytest.fixture
def activity_log() -> InMemoryActivityLog:
    return InMemoryActivityLog()
