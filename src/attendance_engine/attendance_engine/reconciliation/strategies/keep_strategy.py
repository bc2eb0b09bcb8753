from __future__ import annotations

from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.enums import RepairAction
from ..model import HolidayCandidate
from .base import RepairDecision, RepairStrategy


class KeepExistingStrategy(RepairStrategy):
    """Present, half-day or leave: already consistent, nothing to write."""

    def decide(
        self,
        *,
        tenant_id: str,
        username: str,
        candidate: HolidayCandidate,
        existing: Optional[AttendanceRecord],
    ) -> RepairDecision:
        return RepairDecision(action=RepairAction.NONE)
