# backend/taskboard/enums.py
"""
Application Enums - Centralized enum definitions.

Kept separate from constants.py so models, services and workers can import
them without circular dependencies.
"""

from enum import Enum


# =============================================================================
# RECURRENCE
# =============================================================================


class RecurrenceFrequency(str, Enum):
    """Frequency values understood by the recurrence calculator."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class JobState(str, Enum):
    """Lifecycle of a single recurrence reset run."""

    FETCHING = "fetching"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ResetTrigger(str, Enum):
    """Who asked for a reset."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"
    CLI = "cli"


class ActivityAction(str, Enum):
    """Actions written to the activity log by this backend."""

    RECURRENT_RESET = "recurrent_reset"


# =============================================================================
# LOGGING
# =============================================================================


class LogLevel(str, Enum):
    """Log level constants for centralized logging system."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSource(str, Enum):
    """Log source constants for identifying log origins."""

    WORKER = "worker"
    SYSTEM = "system"
    DATABASE = "database"
    SERVICE = "service"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    # Status emojis
    SUCCESS = "✅"
    COMPLETED = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"
    SKIPPED = "⏭️"

    # Work emojis
    TASK = "🔄"
    MIRROR = "🪞"

    # System emojis
    STARTUP = "🚀"
    SHUTDOWN = "🛑"
    DATABASE = "🗄️"
    TIMEZONE = "🌐"

    # Worker emojis
    SCHEDULER = "⏰"

    # Other emojis
    CHART = "📊"
    USER = "👤"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    SYSTEM = "system"
    DATABASE = "database"
    SCHEDULER_WORKER = "scheduler_worker"
    RECURRENCE_RESET_JOB = "recurrence_reset_job"
    RECURRENCE_SERVICE = "recurrence_service"
    MANUAL_RESET_SERVICE = "manual_reset_service"
    TIMEZONE = "timezone"


# =============================================================================
# WORKERS
# =============================================================================


class WorkerType(str, Enum):
    """Worker type identifiers for status reporting and monitoring."""

    SCHEDULER_WORKER = "SchedulerWorker"
    RECURRENCE_RESET_WORKER = "RecurrenceResetWorker"
