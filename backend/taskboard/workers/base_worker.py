# backend/taskboard/workers/base_worker.py
"""
Base worker class for the Taskboard worker architecture.

Provides common interfaces and utilities for all worker types.

This base class provides TWO distinct lifecycle methods:

1. start()/stop() - Worker lifecycle management
   - Called by worker.py to initialize/cleanup workers
   - Sets self.running flag and calls initialize()/cleanup()

2. run() - Optional unit of work (NOT DEFINED HERE)
   - RecurrenceResetJob.run() performs one reset pass
   - The SchedulerWorker decides when run() is called
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..enums import LogEmoji, LoggerName, LogSource
from ..services.logger import get_service_logger


class BaseWorker(ABC):
    """
    Abstract base class for all Taskboard workers.

    Each worker is responsible for a specific domain of functionality.
    """

    def __init__(self, name: str, logger_name: LoggerName = LoggerName.SYSTEM):
        """
        Initialize base worker.

        Args:
            name: Worker name for logging and identification
            logger_name: Logger the worker's log_* helpers write to
        """
        self.name = name
        self.running = False
        self.logger = get_service_logger(logger_name, LogSource.WORKER)

    async def start(self) -> None:
        """Start the worker."""
        self.logger.info(f"Starting {self.name} worker", emoji=LogEmoji.STARTUP)
        self.running = True
        await self.initialize()

    async def stop(self) -> None:
        """Stop the worker."""
        self.logger.info(f"Stopping {self.name} worker", emoji=LogEmoji.SHUTDOWN)
        self.running = False
        await self.cleanup()

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize worker-specific resources."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup worker-specific resources."""
        pass

    def log_info(self, message: str, emoji: Optional[LogEmoji] = None) -> None:
        """Log info message with worker name prefix."""
        self.logger.info(f"[{self.name}] {message}", emoji=emoji)

    def log_error(self, message: str, error: Optional[Exception] = None) -> None:
        """Log error message with worker name prefix."""
        if error:
            self.logger.error(f"[{self.name}] {message}: {error}", exception=error)
        else:
            self.logger.error(f"[{self.name}] {message}")

    def log_warning(self, message: str) -> None:
        """Log warning message with worker name prefix."""
        self.logger.warning(f"[{self.name}] {message}")

    def log_debug(self, message: str) -> None:
        """Log debug message with worker name prefix."""
        self.logger.debug(f"[{self.name}] {message}")

    def get_status(self) -> Dict[str, Any]:
        """
        Get current worker status.

        Returns:
            Dictionary with worker status information
        """
        return {
            "name": self.name,
            "running": self.running,
            "worker_type": self.__class__.__name__,
        }
