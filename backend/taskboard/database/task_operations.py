# backend/taskboard/database/task_operations.py
"""
Task Operations - Database layer for the recurrence engine's view of tasks.

Only reads the columns the engine needs and only ever writes the
completion flag, the due date and updated_at. Tasks are never created or
deleted here.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import psycopg

from ..models.task_model import Task
from ..utils.time_utils import ensure_utc, utc_now
from .core import AsyncDatabase
from .exceptions import TaskOperationError


class TaskQueryBuilder:
    """Centralized query builder for task operations.

    IMPORTANT: For optimal performance, ensure these indexes exist:
    - CREATE INDEX idx_tasks_completed_recurring ON tasks(is_completed) WHERE recurrence_rule IS NOT NULL;
    - CREATE INDEX idx_tasks_mirror_task_id ON tasks(mirror_task_id);
    - CREATE INDEX idx_tasks_user_column ON tasks(user_id, column_id);
    """

    @staticmethod
    def get_base_fields():
        """Get standard fields for task queries."""
        return """
            id, user_id AS owner_id, title, due_date, is_completed,
            recurrence_rule, mirror_task_id, column_id, tags
        """

    @staticmethod
    def build_filtered_query(where_conditions: List[str]):
        """Build filtered query for tasks."""
        fields = TaskQueryBuilder.get_base_fields()
        where_clause = (
            " WHERE " + " AND ".join(where_conditions) if where_conditions else ""
        )
        return f"""
            SELECT {fields}
            FROM tasks
            {where_clause}
            ORDER BY due_date NULLS FIRST, id
        """

    @staticmethod
    def build_completed_recurring_query(
        with_user: bool = False, with_column: bool = False
    ):
        """Build the candidate query for a reset run."""
        conditions = ["is_completed = true", "recurrence_rule IS NOT NULL"]
        if with_user:
            conditions.append("user_id = %(user_id)s")
        if with_column:
            conditions.append("column_id = %(column_id)s")
        return TaskQueryBuilder.build_filtered_query(conditions)

    @staticmethod
    def build_reset_query(require_completed: bool):
        """
        Build the single-statement reset.

        With require_completed the row is only touched while it is still
        completed, which makes a concurrent or repeated reset a no-op.
        """
        guard = " AND is_completed = true" if require_completed else ""
        return f"""
            UPDATE tasks
            SET is_completed = false,
                due_date = %(due_date)s,
                updated_at = %(updated_at)s
            WHERE id = %(task_id)s{guard}
        """

    @staticmethod
    def build_reverse_mirror_query():
        """Build query for tasks pointing at a task through mirror_task_id."""
        return """
            SELECT id
            FROM tasks
            WHERE mirror_task_id = %(task_id)s AND id <> %(task_id)s
            ORDER BY id
        """


class TaskOperations:
    """
    Async database operations for recurring task resets.

    Methods raise TaskOperationError for any storage failure; callers decide
    whether a failure is fatal for the run.
    """

    def __init__(self, db: AsyncDatabase) -> None:
        """Initialize with async database instance."""
        self.db = db

    def _row_to_task(self, row: Dict[str, Any]) -> Task:
        return Task.model_validate(row)

    async def get_completed_recurring_tasks(self) -> List[Task]:
        """
        Get every completed task that carries a recurrence rule.

        Returns:
            Candidate tasks for a reset run, across all owners
        """
        try:
            query = TaskQueryBuilder.build_completed_recurring_query()

            async with self.db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query)
                    rows = await cur.fetchall()
                    return [self._row_to_task(dict(row)) for row in rows]

        except (psycopg.Error, KeyError, ValueError) as e:
            raise TaskOperationError(
                "Failed to load completed recurring tasks",
                operation="get_completed_recurring_tasks",
            ) from e

    async def get_completed_recurring_tasks_for_user(
        self, user_id: str, column_id: Optional[str] = None
    ) -> List[Task]:
        """
        Get one user's completed recurring tasks, optionally within one column.

        Args:
            user_id: Owner of the tasks
            column_id: Restrict to a board column when given

        Returns:
            Candidate tasks for an interactive reset
        """
        try:
            query = TaskQueryBuilder.build_completed_recurring_query(
                with_user=True, with_column=column_id is not None
            )
            params: Dict[str, Any] = {"user_id": user_id}
            if column_id is not None:
                params["column_id"] = column_id

            async with self.db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    rows = await cur.fetchall()
                    return [self._row_to_task(dict(row)) for row in rows]

        except (psycopg.Error, KeyError, ValueError) as e:
            raise TaskOperationError(
                "Failed to load completed recurring tasks for user",
                operation="get_completed_recurring_tasks_for_user",
                details={"user_id": user_id, "column_id": column_id},
            ) from e

    async def get_task_by_id(self, task_id: str) -> Optional[Task]:
        """Get a single task by id, or None when it does not exist."""
        try:
            fields = TaskQueryBuilder.get_base_fields()
            query = f"SELECT {fields} FROM tasks WHERE id = %(task_id)s"

            async with self.db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, {"task_id": task_id})
                    row = await cur.fetchone()
                    return self._row_to_task(dict(row)) if row else None

        except (psycopg.Error, KeyError, ValueError) as e:
            raise TaskOperationError(
                "Failed to get task",
                operation="get_task_by_id",
                details={"task_id": task_id},
            ) from e

    async def reset_task(
        self,
        task_id: str,
        due_date: datetime,
        require_completed: bool = False,
    ) -> bool:
        """
        Mark a task not completed and move its due date, in one statement.

        Args:
            task_id: Task to reset
            due_date: New absolute due date
            require_completed: Only reset while the row is still completed

        Returns:
            True if a row was updated
        """
        try:
            query = TaskQueryBuilder.build_reset_query(require_completed)
            params = {
                "task_id": task_id,
                "due_date": ensure_utc(due_date),
                "updated_at": utc_now(),
            }

            async with self.db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    return cur.rowcount > 0

        except (psycopg.Error, KeyError, ValueError) as e:
            raise TaskOperationError(
                "Failed to reset task",
                operation="reset_task",
                details={"task_id": task_id},
            ) from e

    async def get_reverse_mirror_ids(self, task_id: str) -> List[str]:
        """Ids of tasks whose mirror_task_id points at task_id (excluding itself)."""
        try:
            query = TaskQueryBuilder.build_reverse_mirror_query()

            async with self.db.get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, {"task_id": task_id})
                    rows = await cur.fetchall()
                    return [str(row["id"]) for row in rows]

        except (psycopg.Error, KeyError, ValueError) as e:
            raise TaskOperationError(
                "Failed to get reverse mirrors",
                operation="get_reverse_mirror_ids",
                details={"task_id": task_id},
            ) from e
