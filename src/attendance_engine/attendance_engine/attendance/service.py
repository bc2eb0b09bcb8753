from __future__ import annotations

import logging
from datetime import date, time
from typing import Any, Callable, Optional, Union

from ..common.datetime_utils import OrgClock, parse_iso_date, parse_time_of_day
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_ORG_UTC_OFFSET_MINUTES
from ..core.enums import AttendanceStatus, NotificationEvent, WorkMode
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..notifications.background import BackgroundNotifier
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def _collect(errors: list[dict], parse: Callable[[], Any]) -> Any:
    try:
        return parse()
    except DomainError as e:
        errors.extend(e.errors or [{"field": "", "message": e.message}])
        return None


def parse_status(value: Union[str, AttendanceStatus], field_name: str = "status") -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(
            f"Invalid status. Must be one of: {allowed}",
            [{"field": field_name, "message": f"Invalid status: {value!r}"}],
        )


def parse_work_mode(value: Union[str, WorkMode], field_name: str = "workMode") -> WorkMode:
    if isinstance(value, WorkMode):
        return value
    try:
        return WorkMode.parse(value)
    except ValueError:
        allowed = ", ".join(m.value for m in WorkMode)
        raise ValidationError(
            f"Invalid work mode. Must be one of: {allowed}",
            [{"field": field_name, "message": f"Invalid work mode: {value!r}"}],
        )


class AttendanceService:
    """Single-user, single-day operations: clock-in, clock-out and admin edits."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        clock: Optional[OrgClock] = None,
        notifier: Optional[BackgroundNotifier] = None,
    ):
        self._attendance = attendance
        self._clock = clock or OrgClock(DEFAULT_ORG_UTC_OFFSET_MINUTES)
        self._notifier = notifier

    def _notify_remote_work(self, record: AttendanceRecord, event: NotificationEvent) -> None:
        if record.work_mode != WorkMode.REMOTE_HOME or self._notifier is None:
            return
        try:
            self._notifier.notify(record.username, event, self._clock.now())
        except Exception:
            # Never couple the attendance write to notification delivery.
            logger.warning("Could not queue %s notification for %s", event.value, record.username, exc_info=True)

    def mark(
        self,
        tenant_id: str,
        username: str,
        work_date: Union[str, date],
        clock_in: Union[str, time],
        *,
        work_mode: Union[str, WorkMode, None] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
        status: Union[str, AttendanceStatus, None] = None,
        updated_by: Optional[str] = None,
    ) -> AttendanceRecord:
        errors: list[dict] = []
        tenant_id = _collect(errors, lambda: require_non_empty(tenant_id, "tenantId"))
        username = _collect(errors, lambda: require_non_empty(username, "username"))
        day = _collect(errors, lambda: parse_iso_date(work_date, "date"))
        clock_in_t = _collect(errors, lambda: parse_time_of_day(clock_in, "clockIn"))
        mode = _collect(errors, lambda: parse_work_mode(work_mode or WorkMode.OFFICE))
        status_v = _collect(errors, lambda: parse_status(status or AttendanceStatus.PRESENT))
        if errors:
            raise ValidationError("Invalid attendance data", errors)

        if self._attendance.get_by_key(tenant_id, username, day):
            raise ConflictError("Attendance already marked for today")

        record = AttendanceRecord(
            tenant_id=tenant_id,
            username=username,
            work_date=day,
            status=status_v,
            work_mode=mode,
            clock_in=clock_in_t,
            location=optional_text(location),
            notes=optional_text(notes),
            updated_by=updated_by or username,
        )
        created = self._attendance.create_if_absent(record)
        if created is None:
            # Lost the race against a concurrent mark for the same key.
            raise ConflictError("Attendance already marked for today")

        logger.info("Attendance marked for %s on %s (%s)", username, day, mode.value)
        self._notify_remote_work(created, NotificationEvent.CLOCK_IN)
        return created

    def clock_out(
        self,
        tenant_id: str,
        username: str,
        work_date: Union[str, date, None] = None,
    ) -> AttendanceRecord:
        tenant_id = require_non_empty(tenant_id, "tenantId")
        username = require_non_empty(username, "username")
        day = parse_iso_date(work_date, "date") if work_date else self._clock.today()

        record = self._attendance.get_by_key(tenant_id, username, day)
        if not record:
            raise NotFoundError("No attendance record found for today")
        if record.clock_out is not None:
            raise ConflictError("Already clocked out for today")
        if record.clock_in is None:
            raise ValidationError("Cannot clock out without a clock-in time")

        now_t = self._clock.time_of_day()
        # Clock-out has minute precision; a clock-in with seconds in the same minute still counts.
        if now_t < record.clock_in.replace(second=0, microsecond=0):
            raise ValidationError("Clock-out time cannot be earlier than clock-in time")
        now_t = max(now_t, record.clock_in)

        updated = self._attendance.upsert(record.with_changes(clock_out=now_t, updated_by=username))
        logger.info("Clock-out recorded for %s on %s at %s", username, day, now_t.strftime("%H:%M"))
        self._notify_remote_work(updated, NotificationEvent.CLOCK_OUT)
        return updated

    def get_today_record(self, tenant_id: str, username: str) -> Optional[AttendanceRecord]:
        """Get today's attendance record for a user"""
        return self._attendance.get_by_key(
            require_non_empty(tenant_id, "tenantId"),
            require_non_empty(username, "username"),
            self._clock.today(),
        )

    def update_record(
        self,
        tenant_id: str,
        username: str,
        work_date: Union[str, date],
        *,
        updated_by: str,
        status: Any = _UNSET,
        work_mode: Any = _UNSET,
        clock_in: Any = _UNSET,
        clock_out: Any = _UNSET,
        location: Any = _UNSET,
        notes: Any = _UNSET,
    ) -> AttendanceRecord:
        """Admin-only override of an existing day record.

        Only the given fields change; ``None`` clears a nullable field. An
        absent status with clock times is accepted as the operator sent it.
        """

        errors: list[dict] = []
        tenant_id = _collect(errors, lambda: require_non_empty(tenant_id, "tenantId"))
        username = _collect(errors, lambda: require_non_empty(username, "username"))
        day = _collect(errors, lambda: parse_iso_date(work_date, "date"))

        changes: dict[str, Any] = {}
        if status is not _UNSET:
            changes["status"] = _collect(errors, lambda: parse_status(status))
        if work_mode is not _UNSET:
            changes["work_mode"] = None if work_mode is None else _collect(errors, lambda: parse_work_mode(work_mode))
        if clock_in is not _UNSET:
            changes["clock_in"] = None if not clock_in else _collect(errors, lambda: parse_time_of_day(clock_in, "clockIn"))
        if clock_out is not _UNSET:
            changes["clock_out"] = None if not clock_out else _collect(errors, lambda: parse_time_of_day(clock_out, "clockOut"))
        if location is not _UNSET:
            changes["location"] = optional_text(location)
        if notes is not _UNSET:
            changes["notes"] = optional_text(notes)
        if errors:
            raise ValidationError("Invalid update data", errors)

        record = self._attendance.get_by_key(tenant_id, username, day)
        if not record:
            raise NotFoundError("Attendance record not found")

        candidate = record.with_changes(updated_by=updated_by, **changes)
        if candidate.clock_out and not candidate.clock_in:
            raise ValidationError("Clock-out requires a clock-in time")
        if candidate.clock_in and candidate.clock_out and candidate.clock_out < candidate.clock_in:
            raise ValidationError("Clock-out time cannot be earlier than clock-in time")

        updated = self._attendance.upsert(candidate)
        logger.info("Attendance record %s updated by %s", updated.record_key, updated_by)
        return updated
