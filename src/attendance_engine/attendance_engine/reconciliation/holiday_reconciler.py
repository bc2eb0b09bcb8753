from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence, Union

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import OrgClock, months_before, parse_iso_date, sundays_between
from ..common.validators import require_non_empty
from ..core.constants import (
    DEFAULT_CLOCK_IN,
    DEFAULT_LOCATION,
    DEFAULT_ORG_UTC_OFFSET_MINUTES,
    HOLIDAY_CLOCK_OUT,
    KNOWN_PUBLIC_HOLIDAYS,
    REPAIR_WINDOW_MONTHS,
)
from ..core.enums import AttendanceStatus, RepairAction, WorkMode
from ..holidays.model import Holiday
from ..holidays.repository import HolidayRepository
from ..roster.repository import RosterProvider
from .batch import run_isolated
from .factory import RepairStrategyFactory
from .model import HolidayCandidate, HolidayMarkResult, RepairReport

logger = logging.getLogger(__name__)


class HolidayReconciler:
    """Marks holidays org-wide and repairs historical Sunday/holiday absences.

    ``fix_past_holiday_attendance`` is a convergent scan: every (date, user)
    item is mapped to a repair decision from its current state, so a second
    run over unchanged data finds nothing to fix.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        holidays: HolidayRepository,
        roster: RosterProvider,
        *,
        clock: Optional[OrgClock] = None,
        strategy_factory: Optional[RepairStrategyFactory] = None,
        known_holidays: Sequence[tuple[str, str]] = KNOWN_PUBLIC_HOLIDAYS,
        max_workers: int = 1,
    ):
        self._attendance = attendance
        self._holidays = holidays
        self._roster = roster
        self._clock = clock or OrgClock(DEFAULT_ORG_UTC_OFFSET_MINUTES)
        self._factory = strategy_factory or RepairStrategyFactory()
        self._known_holidays = [(parse_iso_date(d), name) for d, name in known_holidays]
        self._max_workers = max_workers

    def _holiday_record(
        self,
        tenant_id: str,
        username: str,
        day: date,
        holiday_name: str,
        marked_by: Optional[str],
    ) -> AttendanceRecord:
        existing = self._attendance.get_by_key(tenant_id, username, day)
        note = f"Holiday: {holiday_name}"

        if existing is not None and existing.status == AttendanceStatus.PRESENT:
            # Keep the user's own data; only add holiday metadata.
            return existing.with_changes(
                is_holiday=True,
                holiday_name=holiday_name,
                notes=existing.notes or note,
                updated_by=marked_by,
            )

        if existing is not None:
            clock_in = existing.clock_in or DEFAULT_CLOCK_IN
            clock_out = existing.clock_out or HOLIDAY_CLOCK_OUT
            return existing.with_changes(
                status=AttendanceStatus.PRESENT,
                work_mode=existing.work_mode or WorkMode.OFFICE,
                clock_in=clock_in,
                clock_out=max(clock_in, clock_out),
                location=existing.location or DEFAULT_LOCATION,
                notes=note,
                is_holiday=True,
                holiday_name=holiday_name,
                updated_by=marked_by,
            )

        return AttendanceRecord(
            tenant_id=tenant_id,
            username=username,
            work_date=day,
            status=AttendanceStatus.PRESENT,
            work_mode=WorkMode.OFFICE,
            clock_in=DEFAULT_CLOCK_IN,
            clock_out=HOLIDAY_CLOCK_OUT,
            location=DEFAULT_LOCATION,
            notes=note,
            is_holiday=True,
            holiday_name=holiday_name,
            updated_by=marked_by,
            marked_automatically=True,
        )

    def mark_holiday(
        self,
        tenant_id: str,
        holiday_date: Union[str, date],
        holiday_name: str,
        *,
        mark_all_present: bool = False,
        marked_by: Optional[str] = None,
    ) -> HolidayMarkResult:
        tenant_id = require_non_empty(tenant_id, "tenantId")
        holiday_name = require_non_empty(holiday_name, "holidayName")
        day = parse_iso_date(holiday_date, "date")

        holiday = self._holidays.upsert(
            Holiday(tenant_id=tenant_id, holiday_date=day, name=holiday_name, created_by=marked_by)
        )
        logger.info("Holiday %s marked for tenant %s on %s", holiday_name, tenant_id, day)

        if not mark_all_present:
            return HolidayMarkResult(holiday=holiday, users_marked_present=0)

        users = sorted(self._roster.active_usernames(tenant_id))
        outcome = run_isolated(
            users,
            lambda username: self._attendance.upsert(
                self._holiday_record(tenant_id, username, day, holiday_name, marked_by)
            ),
            max_workers=self._max_workers,
            label="mark-holiday",
        )
        logger.info(
            "Holiday %s: %d users marked present, %d failed",
            holiday_name,
            len(outcome.succeeded),
            len(outcome.failed),
        )
        return HolidayMarkResult(
            holiday=holiday,
            users_marked_present=len(outcome.succeeded),
            users_failed=len(outcome.failed),
        )

    def candidate_dates(self, start: date, end: date) -> list[HolidayCandidate]:
        """Known public holidays in the window, plus every Sunday not already listed."""
        by_day: dict[date, HolidayCandidate] = {}
        for day, name in self._known_holidays:
            if start <= day <= end:
                by_day[day] = HolidayCandidate(day=day, name=name, kind="holiday")
        for day in sundays_between(start, end):
            by_day.setdefault(day, HolidayCandidate(day=day, name="Sunday", kind="sunday"))
        return [by_day[d] for d in sorted(by_day)]

    def _apply(self, action: RepairAction, record: AttendanceRecord) -> bool:
        if action == RepairAction.CREATE_PRESENT:
            # A record created concurrently wins; the next run re-evaluates it.
            return self._attendance.create_if_absent(record) is not None
        self._attendance.upsert(record)
        return True

    def fix_past_holiday_attendance(self, tenant_id: str, *, today: Union[str, date, None] = None) -> RepairReport:
        tenant_id = require_non_empty(tenant_id, "tenantId")
        end = parse_iso_date(today, "today") if today else self._clock.today()
        start = months_before(end, REPAIR_WINDOW_MONTHS)

        candidates = self.candidate_dates(start, end)
        logger.info("Checking %d holiday/Sunday dates for tenant %s (%s..%s)", len(candidates), tenant_id, start, end)
        users = sorted(self._roster.active_usernames(tenant_id))

        report = RepairReport(dates_checked=len(candidates))
        failures: list[dict] = []

        for candidate in candidates:
            report.holiday_dates.append(candidate.to_dict())
            existing = {
                r.username: r for r in self._attendance.query_by_date_range(tenant_id, candidate.day, candidate.day)
            }

            plan = []
            for username in users:
                strategy = self._factory.for_record(existing.get(username))
                decision = strategy.decide(
                    tenant_id=tenant_id,
                    username=username,
                    candidate=candidate,
                    existing=existing.get(username),
                )
                if decision.action != RepairAction.NONE and decision.record is not None:
                    plan.append((username, decision))

            outcome = run_isolated(
                plan,
                lambda item: self._apply(item[1].action, item[1].record),
                max_workers=self._max_workers,
                label="fix-past-holidays",
            )
            fixed = sum(1 for _, ok in outcome.succeeded if ok)
            failures.extend(
                {"date": candidate.day.strftime("%Y-%m-%d"), "username": f.item[0], "error": f.error}
                for f in outcome.failed
            )

            report.issues_found += len(plan)
            report.issues_fixed += fixed
            if plan:
                logger.info("%s (%s): %d issues found, %d fixed", candidate.name, candidate.day, len(plan), fixed)

        report.summary = {
            "tenantId": tenant_id,
            "usersChecked": len(users),
            "dateRange": {"from": start.strftime("%Y-%m-%d"), "to": end.strftime("%Y-%m-%d")},
            "sundays": len(sundays_between(start, end)),
            "holidays": sum(1 for c in candidates if c.kind == "holiday"),
            "failures": failures,
        }
        logger.info(
            "Past holiday fix completed for %s: %d records fixed across %d dates",
            tenant_id,
            report.issues_fixed,
            report.dates_checked,
        )
        return report

