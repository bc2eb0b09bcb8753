from __future__ import annotations

from datetime import date, time

import pytest

from attendance_engine.attendance.model import AttendanceRecord
from attendance_engine.core.enums import AttendanceStatus, WorkMode
from attendance_engine.core.exceptions import ValidationError
from attendance_engine.reconciliation.holiday_reconciler import HolidayReconciler

HOLI = date(2024, 3, 8)
TODAY = date(2024, 12, 31)
CHRISTMAS = date(2024, 12, 25)
LAST_SUNDAY = date(2024, 12, 29)


def _present(tenant, username, day, **kw):
    return AttendanceRecord(tenant_id=tenant, username=username, work_date=day, status=AttendanceStatus.PRESENT, **kw)


def _absent(tenant, username, day, **kw):
    return AttendanceRecord(
        tenant_id=tenant, username=username, work_date=day, status=AttendanceStatus.ABSENT, work_mode=None, **kw
    )


def test_mark_holiday_without_marking_present_only_stores_holiday(container, holidays_repo, attendance_repo):
    result = container.holiday_reconciler.mark_holiday("acme", "2024-03-08", "Holi", marked_by="hr")

    assert result.users_marked_present == 0
    assert holidays_repo.get("acme", HOLI).name == "Holi"
    assert attendance_repo.records == {}


def test_mark_holiday_upserts_holiday_by_date(container, holidays_repo):
    container.holiday_reconciler.mark_holiday("acme", HOLI, "Holi")
    container.holiday_reconciler.mark_holiday("acme", HOLI, "Holi (Dhulandi)")

    assert len(holidays_repo.holidays) == 1
    assert holidays_repo.get("acme", HOLI).name == "Holi (Dhulandi)"


def test_mark_holiday_all_present(container, attendance_repo):
    attendance_repo.upsert(
        _present("acme", "alice", HOLI, work_mode=WorkMode.REMOTE_HOME, clock_in=time(10, 0), notes="late train")
    )
    attendance_repo.upsert(_absent("acme", "bob", HOLI))

    result = container.holiday_reconciler.mark_holiday("acme", HOLI, "Holi", mark_all_present=True, marked_by="hr")

    assert result.users_marked_present == 3
    assert result.users_failed == 0

    alice = attendance_repo.get_by_key("acme", "alice", HOLI)
    assert alice.clock_in == time(10, 0)
    assert alice.work_mode == WorkMode.REMOTE_HOME
    assert alice.notes == "late train"
    assert alice.is_holiday and alice.holiday_name == "Holi"

    for username in ("bob", "carol"):
        rec = attendance_repo.get_by_key("acme", username, HOLI)
        assert rec.status == AttendanceStatus.PRESENT
        assert (rec.clock_in, rec.clock_out) == (time(9, 0), time(18, 0))
        assert rec.notes == "Holiday: Holi"
        assert rec.updated_by == "hr"


def test_mark_holiday_counts_failures(container, attendance_repo):
    attendance_repo.fail_on.add(("carol", HOLI))

    result = container.holiday_reconciler.mark_holiday("acme", HOLI, "Holi", mark_all_present=True)

    assert (result.users_marked_present, result.users_failed) == (2, 1)


def test_mark_holiday_requires_name(container):
    with pytest.raises(ValidationError):
        container.holiday_reconciler.mark_holiday("acme", HOLI, "  ")


def test_fix_past_holidays_creates_missing_and_is_idempotent(container, attendance_repo):
    report = container.holiday_reconciler.fix_past_holiday_attendance("globex", today=TODAY)

    # 27 Sundays plus 3 known holidays between 2024-06-30 and 2024-12-31
    assert report.dates_checked == 30
    assert (report.issues_found, report.issues_fixed) == (30, 30)
    assert report.summary["sundays"] == 27
    assert report.summary["holidays"] == 3
    assert report.summary["usersChecked"] == 1
    assert report.summary["dateRange"] == {"from": "2024-06-30", "to": "2024-12-31"}

    rec = attendance_repo.get_by_key("globex", "zed", LAST_SUNDAY)
    assert (rec.clock_in, rec.clock_out) == (time(9, 0), time(17, 0))
    assert rec.notes == "Sunday - Auto marked present"
    assert rec.location == "office"

    snapshot = dict(attendance_repo.records)
    again = container.holiday_reconciler.fix_past_holiday_attendance("globex", today=TODAY)
    assert (again.issues_found, again.issues_fixed) == (0, 0)
    assert attendance_repo.records == snapshot


def test_fix_past_holidays_flips_absent_and_keeps_present(container, attendance_repo):
    attendance_repo.upsert(_absent("globex", "zed", CHRISTMAS))
    attendance_repo.upsert(_absent("globex", "zed", date(2024, 12, 22), clock_in=time(8, 0)))
    kept = _present("globex", "zed", LAST_SUNDAY, work_mode=WorkMode.REMOTE_HOME, clock_in=time(10, 0))
    attendance_repo.upsert(kept)

    report = container.holiday_reconciler.fix_past_holiday_attendance("globex", today=TODAY)

    assert (report.issues_found, report.issues_fixed) == (29, 29)

    christmas = attendance_repo.get_by_key("globex", "zed", CHRISTMAS)
    assert christmas.status == AttendanceStatus.PRESENT
    assert (christmas.clock_in, christmas.clock_out) == (time(9, 0), time(17, 0))
    assert christmas.is_holiday and christmas.holiday_name == "Christmas"
    assert christmas.notes == "Holiday - Fixed from absent to present"

    sunday = attendance_repo.get_by_key("globex", "zed", date(2024, 12, 22))
    assert (sunday.clock_in, sunday.clock_out) == (time(8, 0), time(17, 0))

    assert attendance_repo.get_by_key("globex", "zed", LAST_SUNDAY) == kept


def test_fix_past_holidays_records_failures_and_converges(container, attendance_repo):
    attendance_repo.fail_on.add(("zed", CHRISTMAS))

    report = container.holiday_reconciler.fix_past_holiday_attendance("globex", today=TODAY)
    assert (report.issues_found, report.issues_fixed) == (30, 29)
    assert [f["date"] for f in report.summary["failures"]] == ["2024-12-25"]

    attendance_repo.fail_on.clear()
    report = container.holiday_reconciler.fix_past_holiday_attendance("globex", today=TODAY)
    assert (report.issues_found, report.issues_fixed) == (1, 1)


def test_holiday_on_sunday_is_reported_once_as_holiday(attendance_repo, holidays_repo, roster, clock):
    reconciler = HolidayReconciler(
        attendance_repo, holidays_repo, roster, clock=clock, known_holidays=(("2024-12-29", "Year End"),)
    )

    candidates = reconciler.candidate_dates(date(2024, 12, 20), TODAY)

    assert [(c.day, c.kind, c.name) for c in candidates] == [
        (date(2024, 12, 22), "sunday", "Sunday"),
        (LAST_SUNDAY, "holiday", "Year End"),
    ]


def test_report_to_dict_uses_camel_case(container):
    data = container.holiday_reconciler.fix_past_holiday_attendance("globex", today=TODAY).to_dict()

    assert set(data) == {"datesChecked", "issuesFound", "issuesFixed", "holidayDates", "summary"}
    assert data["holidayDates"][0] == {"date": "2024-06-30", "name": "Sunday", "type": "sunday"}
