"""
Centralized Logger Service Module.

Thin, type-safe layer over loguru shared by services and workers.

Usage:
    from taskboard.services.logger import get_service_logger
    from taskboard.enums import LoggerName, LogSource

    reset_logger = get_service_logger(LoggerName.RECURRENCE_RESET_JOB, LogSource.WORKER)
    reset_logger.info("Run completed", emoji=LogEmoji.COMPLETED)
"""

# Re-export commonly used enums for convenience
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource
from .logger_service import get_service_logger, initialize_global_logger

__all__ = [
    "get_service_logger",
    "initialize_global_logger",
    # Enums
    "LogLevel",
    "LogSource",
    "LoggerName",
    "LogEmoji",
]
