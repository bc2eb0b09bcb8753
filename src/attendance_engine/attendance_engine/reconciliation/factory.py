from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus
from .strategies.absent_strategy import AbsentFlipStrategy
from .strategies.base import RepairStrategy
from .strategies.keep_strategy import KeepExistingStrategy
from .strategies.missing_strategy import MissingRecordStrategy


@dataclass
class RepairStrategyFactory:
    """Factory Pattern: choose the repair strategy from the current record state."""

    def for_record(self, existing: Optional[AttendanceRecord]) -> RepairStrategy:
        if existing is None:
            return MissingRecordStrategy()
        if existing.status == AttendanceStatus.ABSENT:
            return AbsentFlipStrategy()
        return KeepExistingStrategy()
