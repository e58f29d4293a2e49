"""
Database Operation Exceptions - Clean Error Handling Pattern

Database operations raise these instead of logging; the service and worker
layers decide whether an error is fatal, counted, or ignored.

Usage:
    try:
        await cur.execute(query, params)
    except (psycopg.Error, KeyError, ValueError) as e:
        raise TaskOperationError(
            "Failed to reset task", operation="reset_task"
        ) from e
"""

from typing import Any, Dict, Optional


class DatabaseOperationError(Exception):
    """
    Base exception for all database operation failures.

    Provides a clean interface for database errors without requiring
    logging dependencies in the database layer.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.details = details or {}

    def __str__(self):
        if self.operation:
            return f"{self.operation}: {super().__str__()}"
        return super().__str__()


class TaskOperationError(DatabaseOperationError):
    """Task-specific database operation errors."""

    pass


class UserSettingsOperationError(DatabaseOperationError):
    """User settings database operation errors."""

    pass


class ActivityLogOperationError(DatabaseOperationError):
    """Activity log database operation errors."""

    pass
