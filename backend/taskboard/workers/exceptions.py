"""
Worker-specific exceptions for better error handling.

These exceptions replace generic Exception catching with specific,
actionable error types that indicate the exact failure mode.
"""


class WorkerInitializationError(Exception):
    """Raised when a worker fails to initialize required services."""

    pass


class ResetJobError(Exception):
    """Raised when a reset run cannot be started or scheduled."""

    pass
