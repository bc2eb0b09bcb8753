from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored per day."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LEAVE = "leave"


class WorkMode(str, Enum):
    """Where the work for a day was performed."""

    OFFICE = "office"
    REMOTE_HOME = "remote-home"
    REMOTE_OTHER = "remote-other"

    @classmethod
    def parse(cls, value: str) -> "WorkMode":
        """Parse a work mode, accepting the legacy ``wfh``/``remote`` spellings."""
        if not isinstance(value, str):
            raise ValueError(f"{value!r} is not a valid WorkMode")
        normalized = value.strip().lower()
        normalized = _WORK_MODE_ALIASES.get(normalized, normalized)
        return cls(normalized)


_WORK_MODE_ALIASES = {
    "wfh": "remote-home",
    "remote": "remote-other",
}


class NotificationEvent(str, Enum):
    CLOCK_IN = "clock-in"
    CLOCK_OUT = "clock-out"


class RepairAction(str, Enum):
    """Outcome chosen by a repair strategy for one (date, user) item."""

    CREATE_PRESENT = "create-present"
    FLIP_TO_PRESENT = "flip-to-present"
    NONE = "none"
