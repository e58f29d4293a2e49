# backend/taskboard/exceptions.py
"""
Custom exceptions for the Taskboard backend.

Centralized location for domain exception classes. Data layer exceptions live
in database/exceptions.py and worker exceptions in workers/exceptions.py.
"""


class TaskboardError(Exception):
    """Base exception for all Taskboard-specific errors."""

    pass


class InvalidTimezoneError(TaskboardError):
    """Raised by a timezone database when an identifier cannot be resolved."""

    def __init__(self, timezone_name: str, reason: str = ""):
        message = f"Unknown timezone '{timezone_name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.timezone_name = timezone_name


class TaskNotFoundError(TaskboardError):
    """Custom exception for when a task id does not exist."""

    pass
