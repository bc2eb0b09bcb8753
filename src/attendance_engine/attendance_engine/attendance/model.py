from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from typing import Any, Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import AttendanceStatus, WorkMode


def make_record_key(tenant_id: str, username: str, work_date: date) -> str:
    """Deterministic storage key derived from the natural composite key."""
    return f"{tenant_id}|{username}|{work_date.strftime('%Y-%m-%d')}"


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (tenant, user, calendar date)."""

    tenant_id: str
    username: str
    work_date: date
    status: AttendanceStatus
    work_mode: Optional[WorkMode] = WorkMode.OFFICE
    clock_in: Optional[time] = None
    clock_out: Optional[time] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    is_holiday: bool = False
    holiday_name: Optional[str] = None
    updated_by: Optional[str] = None
    marked_automatically: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def record_key(self) -> str:
        return make_record_key(self.tenant_id, self.username, self.work_date)

    def with_changes(self, **changes: Any) -> "AttendanceRecord":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.record_key,
            "tenantId": self.tenant_id,
            "username": self.username,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "workMode": self.work_mode.value if self.work_mode else None,
            "clockIn": format_hhmm(self.clock_in),
            "clockOut": format_hhmm(self.clock_out),
            "location": self.location,
            "notes": self.notes,
            "isHoliday": self.is_holiday,
            "holidayName": self.holiday_name,
            "updatedBy": self.updated_by,
            "markedAutomatically": self.marked_automatically,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
