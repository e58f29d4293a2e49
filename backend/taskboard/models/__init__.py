"""
Taskboard Pydantic Models Package

- task_model: Task rows and their RecurrenceRule as read by the recurrence engine
- reset_run_model: RunSummary produced by every reset run
"""

from .reset_run_model import RunSummary
from .task_model import RecurrenceRule, Task

__all__ = ["RecurrenceRule", "RunSummary", "Task"]
