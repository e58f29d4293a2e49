# backend/taskboard/models/reset_run_model.py
"""
Reset Run Models - Pydantic models describing one recurrence reset run.

RunSummary is the only externally observable output of a run besides the
task rows themselves; it is logged and returned to whoever triggered it.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..enums import JobState, ResetTrigger
from ..utils.time_utils import format_iso_utc


class RunSummary(BaseModel):
    """Counts and outcome of one reset run."""

    trigger: ResetTrigger = ResetTrigger.SCHEDULED
    status: JobState = JobState.FETCHING
    candidates: int = Field(default=0, description="Completed recurring tasks found")
    processed: int = Field(default=0, description="Primary tasks reset")
    mirrors_updated: int = Field(default=0, description="Mirror copies reset")
    errors: int = Field(default=0, description="Failed task or mirror writes")
    skipped: int = Field(
        default=0,
        description="Candidates already reset earlier in the run or by another writer",
    )
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == JobState.COMPLETED

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def message(self) -> str:
        if self.status == JobState.FAILED:
            return f"Recurring task reset failed: {self.error_message or 'unknown error'}"
        if self.candidates == 0:
            return "No completed recurring tasks found"
        return (
            f"Recurring task reset finished: {self.processed} reset, "
            f"{self.mirrors_updated} mirrors, {self.errors} errors"
        )

    def to_log_dict(self) -> Dict[str, Any]:
        """Flat, JSON-safe view for logs and alerting."""
        return {
            "success": self.success,
            "message": self.message,
            "trigger": self.trigger.value,
            "status": self.status.value,
            "candidates": self.candidates,
            "processed": self.processed,
            "mirrors_updated": self.mirrors_updated,
            "errors": self.errors,
            "skipped": self.skipped,
            "started_at": format_iso_utc(self.started_at),
            "finished_at": format_iso_utc(self.finished_at),
            "duration_seconds": self.duration_seconds,
            "error_message": self.error_message,
        }
