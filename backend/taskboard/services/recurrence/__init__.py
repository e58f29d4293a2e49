# backend/taskboard/services/recurrence/__init__.py
"""
Recurrence services: next-occurrence date math, mirror class resolution and
the per-task reset shared by the scheduled job and the interactive path.
"""

from .mirror_resolver import MirrorGraphResolver
from .recurrence_calculator import RecurrenceCalculator, describe_rule, weekday_name
from .reset_processor import ProcessedTaskRegistry, RecurrenceResetProcessor

__all__ = [
    "RecurrenceCalculator",
    "MirrorGraphResolver",
    "RecurrenceResetProcessor",
    "ProcessedTaskRegistry",
    "describe_rule",
    "weekday_name",
]
