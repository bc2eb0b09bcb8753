from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord


@dataclass
class RangeSummary:
    """Per-user tally over an inclusive date range; never persisted."""

    start: date
    end: date
    total_days: int = 0
    present: int = 0
    absent: int = 0
    half_day: int = 0
    leave: int = 0
    office: int = 0
    remote_home: int = 0
    remote_other: int = 0
    total_hours: float = 0.0
    average_hours: float = 0.0
    records: list[AttendanceRecord] = field(default_factory=list)
    year: Optional[int] = None
    month: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "startDate": self.start.strftime("%Y-%m-%d"),
            "endDate": self.end.strftime("%Y-%m-%d"),
            "totalDays": self.total_days,
            "present": self.present,
            "absent": self.absent,
            "halfDay": self.half_day,
            "leave": self.leave,
            "office": self.office,
            "remoteHome": self.remote_home,
            "remoteOther": self.remote_other,
            "totalHours": self.total_hours,
            "averageHours": self.average_hours,
            "records": [r.to_dict() for r in self.records],
        }
        if self.year is not None:
            data["year"] = self.year
            data["month"] = self.month
        return data


@dataclass
class DailySummary:
    """Organization-wide counts for a single date."""

    work_date: date
    total_records: int = 0
    present: int = 0
    absent: int = 0
    half_day: int = 0
    leave: int = 0
    remote: int = 0
    is_holiday: bool = False
    holiday_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.strftime("%Y-%m-%d"),
            "totalRecords": self.total_records,
            "present": self.present,
            "absent": self.absent,
            "halfDay": self.half_day,
            "leave": self.leave,
            "remote": self.remote,
            "isHoliday": self.is_holiday,
            "holidayName": self.holiday_name,
        }
