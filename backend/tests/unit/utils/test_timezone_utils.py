# backend/tests/unit/utils/test_timezone_utils.py
"""
Tests for TimezoneClock and the zone database wrapper.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from taskboard.exceptions import InvalidTimezoneError
from taskboard.utils.timezone_utils import (
    TimezoneClock,
    ZoneInfoDatabase,
    validate_timezone,
)

INSTANT = datetime(2024, 3, 15, 15, 0, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestZoneInfoDatabase:
    def test_resolves_known_zone(self):
        zone = ZoneInfoDatabase().resolve("America/Sao_Paulo")
        assert INSTANT.astimezone(zone).utcoffset() == timedelta(hours=-3)

    @pytest.mark.parametrize("name", ["Not/AZone", "", "../etc/passwd"])
    def test_rejects_unknown_zone(self, name):
        with pytest.raises(InvalidTimezoneError):
            ZoneInfoDatabase().resolve(name)

    def test_validate_timezone(self):
        assert validate_timezone("Asia/Tokyo") is True
        assert validate_timezone("Asia/Atlantis") is False


@pytest.mark.unit
class TestTimezoneClock:
    def test_now_in_zone_reads_wall_clock(self):
        clock = TimezoneClock.frozen_at(INSTANT)
        now = clock.now_in_zone("America/Sao_Paulo")

        assert (now.year, now.month, now.day) == (2024, 3, 15)
        assert (now.hour, now.minute, now.second) == (12, 0, 0)
        assert now.zone_name == "America/Sao_Paulo"
        assert now.is_fallback is False

    def test_weekday_counts_from_sunday(self):
        clock = TimezoneClock.frozen_at(INSTANT)
        # Friday in Sao Paulo, Saturday in Tokyo
        assert clock.now_in_zone("America/Sao_Paulo").weekday == 5
        assert clock.now_in_zone("Asia/Tokyo").weekday == 6

    def test_same_instant_is_different_day_across_zones(self):
        clock = TimezoneClock.frozen_at(INSTANT)
        assert clock.now_in_zone("Asia/Tokyo").date() != clock.now_in_zone(
            "America/Sao_Paulo"
        ).date()

    def test_invalid_zone_falls_back_to_utc(self):
        clock = TimezoneClock.frozen_at(INSTANT)
        now = clock.now_in_zone("Invalid/Zone")

        assert now.is_fallback is True
        assert now.zone_name == "UTC"
        assert now.hour == 15

    def test_explicit_instant_overrides_provider(self):
        clock = TimezoneClock.frozen_at(INSTANT)
        now = clock.now_in_zone("UTC", at=datetime(2020, 1, 1, 8, 0))
        assert (now.year, now.hour) == (2020, 8)

    def test_uses_injected_timezone_database(self):
        tz_database = Mock()
        tz_database.resolve.return_value = timezone(timedelta(hours=5))
        clock = TimezoneClock(tz_database=tz_database, now_provider=lambda: INSTANT)

        now = clock.now_in_zone("Custom/Zone")

        tz_database.resolve.assert_called_once_with("Custom/Zone")
        assert now.hour == 20
