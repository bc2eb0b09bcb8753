from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceRecord


class DurationCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def worked_minutes(self, record: AttendanceRecord) -> int:
        raise NotImplementedError
