# backend/taskboard/workers/__init__.py
"""
Workers: the recurrence reset job and the scheduler that triggers it.
"""

from .base_worker import BaseWorker
from .recurrence_reset_job import RecurrenceResetJob
from .scheduler_worker import SchedulerWorker

__all__ = ["BaseWorker", "RecurrenceResetJob", "SchedulerWorker"]
