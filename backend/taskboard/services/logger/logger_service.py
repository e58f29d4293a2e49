"""
Centralized Logger Service for the Taskboard backend.

Architecture:
- loguru is the only sink manager; initialize_global_logger() configures it
  once per process (console always, rotating file when configured)
- get_service_logger() hands out small per-service loggers that bind the
  logger name and source onto every record and prefix messages with an emoji
"""

import sys
from typing import Any, Dict, Optional

from loguru import logger

from ...constants import (
    LOG_CONSOLE_FORMAT,
    LOG_FILE_COMPRESSION,
    LOG_FILE_FORMAT,
    LOG_FILE_RETENTION,
    LOG_FILE_ROTATION,
)
from ...enums import LogEmoji, LoggerName, LogLevel, LogSource

# Records logged before any bind() still need these keys for the formats
logger.configure(extra={"logger_name": LoggerName.SYSTEM.value, "source": LogSource.SYSTEM.value})


def initialize_global_logger(
    level: LogLevel = LogLevel.INFO,
    log_file: Optional[str] = None,
    enable_console: bool = True,
) -> None:
    """
    Configure loguru sinks for the current process.

    Args:
        level: Minimum level for every sink
        log_file: Optional path of a rotating log file
        enable_console: Whether to write to stderr
    """
    logger.remove()

    if enable_console:
        logger.add(
            sys.stderr,
            level=level.value,
            format=LOG_CONSOLE_FORMAT,
            colorize=sys.stderr.isatty(),
        )

    if log_file:
        logger.add(
            log_file,
            level=level.value,
            format=LOG_FILE_FORMAT,
            rotation=LOG_FILE_ROTATION,
            retention=LOG_FILE_RETENTION,
            compression=LOG_FILE_COMPRESSION,
            enqueue=True,
        )


def get_service_logger(
    logger_name: LoggerName,
    source: LogSource = LogSource.SYSTEM,
    default_emoji: Optional[LogEmoji] = None,
):
    """
    Factory function to create a pre-configured logger for a specific service.

    Emoji priority system (highest to lowest):
    1. Direct: Emoji passed directly to log method call
    2. Instance-set: Default emoji set when creating the service logger
    3. Fallback: Default emoji based on log level

    Args:
        logger_name: The logger name enum to use for all calls
        source: The log source enum to use for all calls (defaults to SYSTEM)
        default_emoji: Instance-level default emoji that overrides level-based fallbacks

    Returns:
        ServiceLogger instance with error, warning, info, debug methods
    """
    bound = logger.bind(logger_name=logger_name.value, source=source.value)

    def _resolve_emoji(
        method_emoji: Optional[LogEmoji], fallback_emoji: LogEmoji
    ) -> LogEmoji:
        if method_emoji is not None:
            return method_emoji
        if default_emoji is not None:
            return default_emoji
        return fallback_emoji

    def _emit(
        level: str,
        message: str,
        emoji: LogEmoji,
        context: Optional[Dict[str, Any]],
        exception: Optional[BaseException] = None,
    ) -> None:
        target = bound.bind(**context) if context else bound
        if exception is not None:
            target = target.opt(exception=exception)
        target.log(level, f"{emoji.value} {message}")

    class ServiceLogger:
        name = logger_name

        @staticmethod
        def error(
            message: str,
            exception: Optional[BaseException] = None,
            error_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            """Log an error, attaching the traceback when an exception is given."""
            _emit(
                LogLevel.ERROR.value,
                message,
                _resolve_emoji(emoji, LogEmoji.ERROR),
                error_context,
                exception,
            )

        @staticmethod
        def warning(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            _emit(
                LogLevel.WARNING.value,
                message,
                _resolve_emoji(emoji, LogEmoji.WARNING),
                extra_context,
            )

        @staticmethod
        def info(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            _emit(
                LogLevel.INFO.value,
                message,
                _resolve_emoji(emoji, LogEmoji.INFO),
                extra_context,
            )

        @staticmethod
        def debug(
            message: str,
            extra_context: Optional[Dict[str, Any]] = None,
            emoji: Optional[LogEmoji] = None,
        ) -> None:
            _emit(
                LogLevel.DEBUG.value,
                message,
                _resolve_emoji(emoji, LogEmoji.DEBUG),
                extra_context,
            )

    return ServiceLogger()
