from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Union

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, parse_iso_date
from ..common.validators import require_in_range, require_non_empty
from ..core.enums import AttendanceStatus, WorkMode
from ..core.exceptions import ValidationError
from ..holidays.repository import HolidayRepository
from .calculator.base import DurationCalculator
from .calculator.standard_calculator import StandardDurationCalculator
from .model import DailySummary, RangeSummary

_STATUS_FIELD = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.HALF_DAY: "half_day",
    AttendanceStatus.LEAVE: "leave",
}

_MODE_FIELD = {
    WorkMode.OFFICE: "office",
    WorkMode.REMOTE_HOME: "remote_home",
    WorkMode.REMOTE_OTHER: "remote_other",
}


class SummaryAggregator:
    def __init__(
        self,
        attendance: AttendanceRepository,
        holidays: Optional[HolidayRepository] = None,
        *,
        calculator: Optional[DurationCalculator] = None,
    ):
        self._attendance = attendance
        self._holidays = holidays
        self._calculator = calculator or StandardDurationCalculator()

    def _tally(self, summary: RangeSummary, records: Iterable[AttendanceRecord]) -> RangeSummary:
        total_minutes = 0
        for r in sorted(records, key=lambda x: x.work_date):
            summary.records.append(r)
            summary.total_days += 1

            status_field = _STATUS_FIELD.get(r.status)
            if status_field:
                setattr(summary, status_field, getattr(summary, status_field) + 1)
            mode_field = _MODE_FIELD.get(r.work_mode) if r.work_mode else None
            if mode_field:
                setattr(summary, mode_field, getattr(summary, mode_field) + 1)

            total_minutes += self._calculator.worked_minutes(r)

        total_hours = total_minutes / 60
        summary.total_hours = round(total_hours, 2)
        summary.average_hours = round(total_hours / summary.total_days, 2) if summary.total_days else 0.0
        return summary

    def get_attendance_summary(
        self,
        username: str,
        tenant_id: str,
        start_date: Union[str, date],
        end_date: Union[str, date],
    ) -> RangeSummary:
        username = require_non_empty(username, "username")
        tenant_id = require_non_empty(tenant_id, "tenantId")
        start = parse_iso_date(start_date, "startDate")
        end = parse_iso_date(end_date, "endDate")
        if start > end:
            raise ValidationError("Start date must be before or equal to end date")

        records = self._attendance.query_by_date_range(tenant_id, start, end, username=username)
        return self._tally(RangeSummary(start=start, end=end), records)

    def get_monthly_attendance(self, username: str, tenant_id: str, year: int, month: int) -> RangeSummary:
        year = require_in_range(year, "year", 1, 9999)
        month = require_in_range(month, "month", 1, 12)
        start, end = month_bounds(year, month)

        summary = self.get_attendance_summary(username, tenant_id, start, end)
        summary.year = year
        summary.month = month
        return summary

    def get_daily_summary(self, tenant_id: str, work_date: Union[str, date]) -> DailySummary:
        tenant_id = require_non_empty(tenant_id, "tenantId")
        day = parse_iso_date(work_date, "date")

        summary = DailySummary(work_date=day)
        for r in self._attendance.query_by_date_range(tenant_id, day, day):
            summary.total_records += 1
            status_field = _STATUS_FIELD.get(r.status)
            if status_field:
                setattr(summary, status_field, getattr(summary, status_field) + 1)
            if r.work_mode in (WorkMode.REMOTE_HOME, WorkMode.REMOTE_OTHER):
                summary.remote += 1

        if self._holidays is not None:
            holiday = self._holidays.get(tenant_id, day)
            if holiday is not None:
                summary.is_holiday = True
                summary.holiday_name = holiday.name
        return summary
