from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.constants import DEFAULT_CLOCK_IN, DEFAULT_CLOCK_OUT, DEFAULT_LOCATION, SYSTEM_ACTOR
from ...core.enums import AttendanceStatus, RepairAction, WorkMode
from ..model import HolidayCandidate
from .base import RepairDecision, RepairStrategy


class AbsentFlipStrategy(RepairStrategy):
    """Absent on a holiday/Sunday: flip to present, defaulting only missing fields."""

    def decide(
        self,
        *,
        tenant_id: str,
        username: str,
        candidate: HolidayCandidate,
        existing: Optional[AttendanceRecord],
    ) -> RepairDecision:
        if existing is None:
            raise ValueError("AbsentFlipStrategy needs an existing record")
        clock_in = existing.clock_in or DEFAULT_CLOCK_IN
        clock_out = existing.clock_out or DEFAULT_CLOCK_OUT
        if clock_out < clock_in:
            clock_out = clock_in
        record = existing.with_changes(
            status=AttendanceStatus.PRESENT,
            work_mode=existing.work_mode or WorkMode.OFFICE,
            clock_in=clock_in,
            clock_out=clock_out,
            location=existing.location or DEFAULT_LOCATION,
            notes=existing.notes or f"{candidate.label} - Fixed from absent to present",
            is_holiday=existing.is_holiday or candidate.kind == "holiday",
            holiday_name=existing.holiday_name or (candidate.name if candidate.kind == "holiday" else None),
            updated_by=SYSTEM_ACTOR,
        )
        return RepairDecision(action=RepairAction.FLIP_TO_PRESENT, record=record)
