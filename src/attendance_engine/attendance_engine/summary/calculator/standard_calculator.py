from __future__ import annotations

from .base import DurationCalculator
from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import minutes_between


class StandardDurationCalculator(DurationCalculator):
    """Standard rule: out - in, 0 when either side is missing, not below 0."""

    def worked_minutes(self, record: AttendanceRecord) -> int:
        if not record.clock_in or not record.clock_out:
            return 0
        return max(minutes_between(record.clock_in, record.clock_out), 0)
