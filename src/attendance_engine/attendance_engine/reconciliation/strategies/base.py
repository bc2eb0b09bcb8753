from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...attendance.model import AttendanceRecord
from ...core.enums import RepairAction
from ..model import HolidayCandidate


@dataclass(frozen=True)
class RepairDecision:
    action: RepairAction
    record: Optional[AttendanceRecord] = None


class RepairStrategy(ABC):
    """Strategy Pattern: decide how one (date, user) item converges to present."""

    @abstractmethod
    def decide(
        self,
        *,
        tenant_id: str,
        username: str,
        candidate: HolidayCandidate,
        existing: Optional[AttendanceRecord],
    ) -> RepairDecision:
        raise NotImplementedError
