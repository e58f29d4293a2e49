# backend/taskboard/utils/timezone_utils.py
"""
Timezone utilities for per-owner wall clock calculations.

CRITICAL: Never use the host's local timezone. Every "now" is read as an
absolute UTC instant and projected into an explicit IANA zone resolved through
an injected TimezoneDatabase.

Unknown identifiers degrade to UTC instead of failing, so one owner's bad
preference cannot stop a batch that serves every other owner.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from functools import lru_cache
from typing import Callable, Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..constants import DEFAULT_TIMEZONE
from ..enums import LogEmoji, LoggerName, LogSource
from ..exceptions import InvalidTimezoneError
from ..services.logger import get_service_logger
from .time_utils import UTC_TIMEZONE, ensure_utc, utc_now

tz_logger = get_service_logger(LoggerName.TIMEZONE, LogSource.SERVICE, LogEmoji.TIMEZONE)


class TimezoneDatabase(Protocol):
    """Resolves IANA identifiers to tzinfo objects."""

    def resolve(self, timezone_name: str) -> tzinfo:
        """Return the zone or raise InvalidTimezoneError."""
        ...


class ZoneInfoDatabase:
    """TimezoneDatabase backed by the zoneinfo module (system tzdata or the tzdata package)."""

    def resolve(self, timezone_name: str) -> tzinfo:
        if not timezone_name or not isinstance(timezone_name, str):
            raise InvalidTimezoneError(str(timezone_name), "empty identifier")
        return _load_zone(timezone_name)


@lru_cache(maxsize=256)
def _load_zone(timezone_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise InvalidTimezoneError(timezone_name, str(e)) from e


def validate_timezone(timezone_str: str) -> bool:
    """
    Validate if a timezone string is valid.

    Args:
        timezone_str: Timezone string to validate

    Returns:
        True if valid, False otherwise
    """
    try:
        ZoneInfoDatabase().resolve(timezone_str)
        return True
    except InvalidTimezoneError:
        return False


@dataclass(frozen=True)
class CalendarInstant:
    """
    Wall clock reading in a zone at one moment.

    Callers treat the components as a naive local date-time for arithmetic and
    use `zone` to turn the result back into an absolute instant.
    """

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    zone: tzinfo
    zone_name: str
    is_fallback: bool = False

    @property
    def weekday(self) -> int:
        """Day of week with Sunday = 0 ... Saturday = 6."""
        return (self.date().weekday() + 1) % 7

    def date(self) -> date:
        return date(self.year, self.month, self.day)

    def time(self) -> time:
        return time(self.hour, self.minute, self.second)


class TimezoneClock:
    """
    Reads "now" as calendar components in an arbitrary IANA zone.

    Both the zone database and the source of the current instant are
    injected, so the clock never depends on the host's locale settings.
    """

    def __init__(
        self,
        tz_database: Optional[TimezoneDatabase] = None,
        now_provider: Callable[[], datetime] = utc_now,
    ):
        self.tz_database = tz_database or ZoneInfoDatabase()
        self.now_provider = now_provider

    @classmethod
    def frozen_at(
        cls, instant: datetime, tz_database: Optional[TimezoneDatabase] = None
    ) -> "TimezoneClock":
        """Clock that always reports the given instant."""
        fixed = ensure_utc(instant)
        return cls(tz_database=tz_database, now_provider=lambda: fixed)

    def resolve_zone(self, timezone_name: str) -> tuple[tzinfo, str, bool]:
        """
        Resolve a zone, falling back to UTC.

        Returns:
            (zone, name actually used, whether the fallback was applied)
        """
        try:
            return self.tz_database.resolve(timezone_name), timezone_name, False
        except InvalidTimezoneError as e:
            tz_logger.warning(
                f"Invalid timezone '{timezone_name}', falling back to {DEFAULT_TIMEZONE}: {e}",
                extra_context={"timezone": str(timezone_name)},
            )
            return UTC_TIMEZONE, DEFAULT_TIMEZONE, True

    def now_in_zone(
        self, timezone_name: str, at: Optional[datetime] = None
    ) -> CalendarInstant:
        """
        Wall clock reading in `timezone_name` at `at` (defaults to now).

        Args:
            timezone_name: IANA identifier, e.g. "America/Sao_Paulo"
            at: Absolute instant to read; naive values are taken as UTC

        Returns:
            CalendarInstant in the resolved zone (UTC when the name is invalid)
        """
        instant = ensure_utc(at) if at is not None else ensure_utc(self.now_provider())
        zone, zone_name, is_fallback = self.resolve_zone(timezone_name)
        local = instant.astimezone(zone)
        return CalendarInstant(
            year=local.year,
            month=local.month,
            day=local.day,
            hour=local.hour,
            minute=local.minute,
            second=local.second,
            zone=zone,
            zone_name=zone_name,
            is_fallback=is_fallback,
        )
