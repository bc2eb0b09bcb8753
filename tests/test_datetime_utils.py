from datetime import date, datetime, time, timedelta, timezone

import pytest

from attendance_engine.attendance.model import make_record_key
from attendance_engine.common.datetime_utils import (
    OrgClock,
    month_bounds,
    months_before,
    parse_time_of_day,
    sundays_between,
)
from attendance_engine.core.exceptions import ValidationError


def test_months_before_clamps_to_month_end():
    assert months_before(date(2024, 8, 31), 6) == date(2024, 2, 29)
    assert months_before(date(2024, 3, 15), 6) == date(2023, 9, 15)


def test_sundays_between_is_inclusive():
    assert sundays_between(date(2024, 3, 3), date(2024, 3, 10)) == [date(2024, 3, 3), date(2024, 3, 10)]


def test_month_bounds_handles_leap_year():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


def test_parse_time_accepts_seconds_and_rejects_garbage():
    assert parse_time_of_day("18:05:09") == time(18, 5, 9)
    with pytest.raises(ValidationError):
        parse_time_of_day("6pm")


def test_record_key_is_deterministic():
    assert make_record_key("acme", "alice", date(2024, 3, 4)) == "acme|alice|2024-03-04"


def test_org_clock_uses_fixed_offset():
    clock = OrgClock(330)

    assert clock.tz.utcoffset(None) == timedelta(hours=5, minutes=30)
    assert clock.now().utcoffset() == timedelta(hours=5, minutes=30)
    assert abs(clock.now() - datetime.now(timezone.utc)) < timedelta(minutes=1)
