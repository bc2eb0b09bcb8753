from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Union

from ..core.exceptions import ValidationError

_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")


def _invalid_date(value: object, field_name: str) -> ValidationError:
    return ValidationError(
        f"{field_name} must be in YYYY-MM-DD format",
        [{"field": field_name, "message": f"Invalid date: {value!r}"}],
    )


def parse_iso_date(value: Union[str, date], field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise _invalid_date(value, field_name)
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise _invalid_date(value, field_name)


def parse_time_of_day(value: Union[str, time], field_name: str = "time") -> time:
    """Parse HH:MM or HH:MM:SS into a time of day."""
    if isinstance(value, time):
        return value
    m = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise ValidationError(
            f"{field_name} must be HH:MM or HH:MM:SS",
            [{"field": field_name, "message": f"Invalid time: {value!r}"}],
        )
    return time(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))


def format_hhmm(value: time | None) -> str | None:
    return value.strftime("%H:%M") if value else None


def minutes_between(start: time, end: time) -> int:
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def sundays_between(start: date, end: date) -> list[date]:
    return [d for d in iter_dates(start, end) if d.weekday() == calendar.SUNDAY]


def months_before(value: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to the month's last day."""
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


class OrgClock:
    """Current time in the organization's fixed UTC offset.

    Note: Wrapped so tests can inject a frozen ``now``.
    """

    def __init__(self, utc_offset_minutes: int):
        self._tz = timezone(timedelta(minutes=int(utc_offset_minutes)))

    @property
    def tz(self) -> timezone:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def today(self) -> date:
        return self.now().date()

    def time_of_day(self) -> time:
        """Minute-precision local time, as stored in clock fields."""
        return self.now().time().replace(second=0, microsecond=0, tzinfo=None)
