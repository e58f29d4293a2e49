# backend/taskboard/services/recurrence/recurrence_calculator.py
"""
Recurrence Calculator - next due date for a completed recurring task.

All arithmetic is done on the owner's wall clock: "today" is the owner's
calendar day, and the task's time of day (read in the owner's zone) is kept
across occurrences. The result is converted back to an absolute UTC instant.

Rules:
- no rule / malformed rule -> today at the preserved time
- weekday mode             -> next matching weekday, never today
- daily / weekly / monthly -> today + interval units
- unknown frequency        -> tomorrow

Monthly steps overflow forward when the day does not exist in the target
month (Jan 31 + 1 month -> Mar 2 or Mar 3), matching how the board has always
computed it.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from ...constants import DAYS_PER_WEEK, MIN_RECURRENCE_INTERVAL, WEEKDAY_NAMES
from ...enums import RecurrenceFrequency
from ...models.task_model import RecurrenceRule
from ...utils.time_utils import UTC_TIMEZONE, ensure_utc
from ...utils.timezone_utils import CalendarInstant, TimezoneClock


def weekday_name(weekday: int) -> str:
    """Name of a Sunday = 0 weekday index."""
    if 0 <= weekday < DAYS_PER_WEEK:
        return WEEKDAY_NAMES[weekday]
    return f"weekday {weekday}"


def describe_rule(rule: Optional[RecurrenceRule]) -> str:
    """Short human readable form of a rule for log lines."""
    if rule is None:
        return "no rule"
    if rule.is_weekday_mode:
        return f"every {weekday_name(rule.weekday)}"

    units = {
        RecurrenceFrequency.DAILY.value: "day",
        RecurrenceFrequency.WEEKLY.value: "week",
        RecurrenceFrequency.MONTHLY.value: "month",
    }
    unit = units.get(rule.frequency)
    if unit is None:
        return f"unknown frequency '{rule.frequency}' (daily)"
    if rule.interval == 1:
        return f"every {unit}"
    return f"every {rule.interval} {unit}s"


def add_months_with_overflow(start: date, months: int) -> date:
    """
    Add calendar months, rolling surplus days into the following month.

    Jan 31 + 1 month is "Feb 31", which rolls over to Mar 2 (leap year)
    or Mar 3.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1) + timedelta(days=start.day - 1)


class RecurrenceCalculator:
    """
    Computes next due dates in an owner's timezone.

    Shared by the scheduled reset job and the interactive reset service so
    both paths agree on every date.
    """

    def __init__(self, clock: Optional[TimezoneClock] = None):
        self.clock = clock or TimezoneClock()

    def next_due(
        self,
        current_due: Optional[datetime],
        rule: Optional[RecurrenceRule],
        timezone: str,
        at: Optional[datetime] = None,
    ) -> datetime:
        """
        Next occurrence after a task was completed.

        Args:
            current_due: Task's due date before the reset (None if unset)
            rule: Parsed recurrence rule (None for missing or malformed)
            timezone: Owner's IANA timezone (invalid values fall back to UTC)
            at: Reference instant; defaults to the clock's now

        Returns:
            Timezone aware UTC datetime
        """
        instant = ensure_utc(at) if at is not None else ensure_utc(self.clock.now_provider())
        now = self.clock.now_in_zone(timezone, instant)

        if current_due is None:
            return instant

        preserved = self._time_of_day(current_due, now)
        target_day = self._target_date(now, rule)

        local = datetime.combine(target_day, preserved, tzinfo=now.zone)
        return local.astimezone(UTC_TIMEZONE)

    def _time_of_day(self, current_due: datetime, now: CalendarInstant) -> time:
        local_due = ensure_utc(current_due).astimezone(now.zone)
        return time(local_due.hour, local_due.minute, local_due.second)

    def _target_date(self, now: CalendarInstant, rule: Optional[RecurrenceRule]) -> date:
        today = now.date()
        if rule is None:
            return today

        if rule.is_weekday_mode:
            days_ahead = (rule.weekday - now.weekday) % DAYS_PER_WEEK
            if days_ahead == 0:
                days_ahead = DAYS_PER_WEEK
            return today + timedelta(days=days_ahead)

        interval = max(MIN_RECURRENCE_INTERVAL, rule.interval)
        if rule.frequency == RecurrenceFrequency.DAILY.value:
            return today + timedelta(days=interval)
        if rule.frequency == RecurrenceFrequency.WEEKLY.value:
            return today + timedelta(days=DAYS_PER_WEEK * interval)
        if rule.frequency == RecurrenceFrequency.MONTHLY.value:
            return add_months_with_overflow(today, interval)

        return today + timedelta(days=1)
