# backend/taskboard/models/task_model.py
"""
Task Models - Pydantic models for the task fields the recurrence engine reads.

Only the subset of the tasks table this backend needs is modelled; board
placement, subtasks and metrics belong to the frontend.
"""

import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DAYS_PER_WEEK, MIN_RECURRENCE_INTERVAL
from ..enums import RecurrenceFrequency
from ..utils.time_utils import ensure_utc


class RecurrenceRule(BaseModel):
    """
    Recurrence rule stored as JSON on a task.

    Two mutually exclusive modes:
    - weekday mode: {"weekday": 0-6}, Sunday = 0
    - frequency mode: {"frequency": "daily"|"weekly"|"monthly", "interval": n}

    When both keys are present weekday mode wins.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    frequency: str = Field(
        default=RecurrenceFrequency.DAILY.value,
        description="daily, weekly or monthly; anything else advances one day",
    )
    interval: int = Field(
        default=MIN_RECURRENCE_INTERVAL,
        ge=MIN_RECURRENCE_INTERVAL,
        description="Number of frequency units between occurrences",
    )
    weekday: Optional[int] = Field(
        default=None,
        ge=0,
        le=DAYS_PER_WEEK - 1,
        description="Fixed weekday for weekday mode (Sunday = 0)",
    )

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v: Any) -> str:
        if v is None or v == "":
            return RecurrenceFrequency.DAILY.value
        return str(v).strip().lower()

    @field_validator("interval", mode="before")
    @classmethod
    def floor_interval(cls, v: Any) -> int:
        """Missing, non-numeric, zero or negative intervals advance one unit."""
        if isinstance(v, bool):
            return MIN_RECURRENCE_INTERVAL
        try:
            interval = int(v)
        except (TypeError, ValueError):
            return MIN_RECURRENCE_INTERVAL
        return max(MIN_RECURRENCE_INTERVAL, interval)

    @field_validator("weekday", mode="before")
    @classmethod
    def reject_boolean_weekday(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("weekday must be an integer between 0 and 6")
        return v

    @property
    def is_weekday_mode(self) -> bool:
        return self.weekday is not None

    @classmethod
    def parse(cls, raw: Any) -> Optional["RecurrenceRule"]:
        """
        Build a rule from the raw JSON value of the recurrence_rule column.

        Returns None for a missing or malformed value; the calculator treats
        that as "today at the preserved time".
        """
        if raw is None:
            return None
        if isinstance(raw, RecurrenceRule):
            return raw
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError:
                return None
        if not isinstance(raw, dict):
            return None
        try:
            return cls.model_validate(raw)
        except ValueError:
            return None


class Task(BaseModel):
    """Task row as seen by the recurrence engine."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str = Field(..., description="Owner user id (tasks.user_id)")
    title: str = ""
    due_date: Optional[datetime] = None
    is_completed: bool = False
    recurrence_rule: Optional[RecurrenceRule] = None
    mirror_task_id: Optional[str] = None
    column_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("id", "owner_id", "mirror_task_id", "column_id", mode="before")
    @classmethod
    def stringify_ids(cls, v: Any) -> Any:
        # uuid columns come back from psycopg as uuid.UUID
        return str(v) if v is not None else None

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Any) -> str:
        return v or ""

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @field_validator("is_completed", mode="before")
    @classmethod
    def null_is_not_completed(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("recurrence_rule", mode="before")
    @classmethod
    def parse_recurrence_rule(cls, v: Any) -> Optional[RecurrenceRule]:
        return RecurrenceRule.parse(v)

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags(cls, v: Any) -> Any:
        return v or []
