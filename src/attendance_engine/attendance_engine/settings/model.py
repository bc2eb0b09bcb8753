from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AttendanceSettings:
    """Per-organization attendance configuration.

    Note: ``deadline_*`` and ``half_day_enabled`` are stored and exposed only.
    Marking does not consult them to classify lateness or half-days.
    """

    tenant_id: str
    deadline_hour: int = 12
    deadline_minute: int = 0
    auto_mark_absent_enabled: bool = True
    auto_mark_absent_time: str = "23:59"
    half_day_enabled: bool = False

    def to_dict(self) -> dict:
        return {
            "tenantId": self.tenant_id,
            "deadlineHour": self.deadline_hour,
            "deadlineMinute": self.deadline_minute,
            "autoMarkAbsent": self.auto_mark_absent_enabled,
            "autoMarkAbsentTime": self.auto_mark_absent_time,
            "halfDayEnabled": self.half_day_enabled,
        }
