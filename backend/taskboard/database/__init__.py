# backend/taskboard/database/__init__.py
"""
Database package.

AsyncDatabase owns the psycopg pool; the *Operations classes are composed
around it and hold all SQL for their table.
"""

from .activity_log_operations import ActivityLogOperations
from .core import AsyncDatabase, AsyncDatabaseCore
from .exceptions import (
    ActivityLogOperationError,
    DatabaseOperationError,
    TaskOperationError,
    UserSettingsOperationError,
)
from .task_operations import TaskOperations
from .user_settings_operations import UserSettingsOperations

__all__ = [
    "AsyncDatabase",
    "AsyncDatabaseCore",
    "TaskOperations",
    "UserSettingsOperations",
    "ActivityLogOperations",
    "DatabaseOperationError",
    "TaskOperationError",
    "UserSettingsOperationError",
    "ActivityLogOperationError",
]
