from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.constants import DEFAULT_CLOCK_IN, DEFAULT_CLOCK_OUT, DEFAULT_LOCATION, SYSTEM_ACTOR
from ...core.enums import AttendanceStatus, RepairAction, WorkMode
from ..model import HolidayCandidate
from .base import RepairDecision, RepairStrategy


class MissingRecordStrategy(RepairStrategy):
    """No record for the day: create a present one with default hours."""

    def decide(
        self,
        *,
        tenant_id: str,
        username: str,
        candidate: HolidayCandidate,
        existing: Optional[AttendanceRecord],
    ) -> RepairDecision:
        record = AttendanceRecord(
            tenant_id=tenant_id,
            username=username,
            work_date=candidate.day,
            status=AttendanceStatus.PRESENT,
            work_mode=WorkMode.OFFICE,
            clock_in=DEFAULT_CLOCK_IN,
            clock_out=DEFAULT_CLOCK_OUT,
            location=DEFAULT_LOCATION,
            notes=f"{candidate.label} - Auto marked present",
            is_holiday=candidate.kind == "holiday",
            holiday_name=candidate.name if candidate.kind == "holiday" else None,
            updated_by=SYSTEM_ACTOR,
            marked_automatically=True,
        )
        return RepairDecision(action=RepairAction.CREATE_PRESENT, record=record)
