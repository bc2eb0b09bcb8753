from __future__ import annotations

from datetime import date, time

import pytest

from attendance_engine.attendance.model import AttendanceRecord
from attendance_engine.core.enums import AttendanceStatus, WorkMode
from attendance_engine.core.exceptions import ValidationError

DAY = date(2024, 3, 5)


def test_each_action_sets_status_and_times(container, attendance_repo):
    result = container.day_updater.bulk_update(
        "acme",
        "2024-03-05",
        [
            {"username": "alice", "action": "mark_present"},
            {"username": "bob", "action": "mark_half_day"},
            {"username": "carol", "action": "mark_leave"},
            {"username": "dave", "action": "mark_absent"},
        ],
        updated_by="hr",
    )

    assert result.successful == 4
    alice = attendance_repo.get_by_key("acme", "alice", DAY)
    assert (alice.status, alice.clock_in, alice.clock_out) == (AttendanceStatus.PRESENT, time(9, 0), None)
    assert alice.work_mode == WorkMode.OFFICE
    bob = attendance_repo.get_by_key("acme", "bob", DAY)
    assert (bob.status, bob.clock_in, bob.clock_out) == (AttendanceStatus.HALF_DAY, time(9, 0), time(13, 0))
    carol = attendance_repo.get_by_key("acme", "carol", DAY)
    assert (carol.status, carol.clock_in, carol.work_mode) == (AttendanceStatus.LEAVE, None, None)
    assert attendance_repo.get_by_key("acme", "dave", DAY).status == AttendanceStatus.ABSENT
    assert {r.updated_by for r in attendance_repo.records.values()} == {"hr"}


def test_existing_record_is_updated_in_place(container, attendance_repo):
    attendance_repo.upsert(
        AttendanceRecord(
            tenant_id="acme",
            username="alice",
            work_date=DAY,
            status=AttendanceStatus.PRESENT,
            clock_in=time(8, 45),
            clock_out=time(17, 0),
            notes="came early",
        )
    )

    container.day_updater.bulk_update("acme", DAY, [{"username": "alice", "action": "mark_absent"}])

    rec = attendance_repo.get_by_key("acme", "alice", DAY)
    assert len(attendance_repo.records) == 1
    assert (rec.status, rec.clock_in, rec.clock_out) == (AttendanceStatus.ABSENT, None, None)
    assert rec.notes == "came early"
    assert rec.updated_by == "admin"


def test_bad_operations_fail_alone(container, attendance_repo):
    result = container.day_updater.bulk_update(
        "acme",
        DAY,
        [
            {"username": "alice", "action": "mark_sick"},
            {"action": "mark_present"},
            "bob",
            {"username": "carol", "action": "mark_present"},
        ],
    )

    assert [r["success"] for r in result.results] == [False, False, False, True]
    assert result.results[0] == {"username": "alice", "success": False, "error": "Invalid action: mark_sick"}
    assert result.results[1]["error"] == "Username and action are required"
    assert result.results[2]["username"] is None
    assert list(attendance_repo.records) == ["acme|carol|2024-03-05"]


def test_storage_failure_is_reported_per_user(container, attendance_repo):
    attendance_repo.fail_on.add(("bob", DAY))

    result = container.day_updater.bulk_update(
        "acme",
        DAY,
        [{"username": name, "action": "mark_present"} for name in ("alice", "bob", "carol")],
    )

    assert [r["username"] for r in result.results] == ["alice", "bob", "carol"]
    assert "storage unavailable" in result.results[1]["error"]
    assert result.to_dict()["summary"] == {"total": 3, "successful": 2, "failed": 1}
    assert attendance_repo.get_by_key("acme", "bob", DAY) is None


@pytest.mark.parametrize("operations", [[], None, {"username": "alice", "action": "mark_present"}])
def test_operations_must_be_a_non_empty_list(container, attendance_repo, operations):
    with pytest.raises(ValidationError) as exc:
        container.day_updater.bulk_update("acme", DAY, operations)

    assert exc.value.errors[0]["field"] == "operations"
    assert attendance_repo.records == {}


def test_invalid_date_is_rejected_before_any_write(container, attendance_repo):
    with pytest.raises(ValidationError):
        container.day_updater.bulk_update("acme", "05/03/2024", [{"username": "alice", "action": "mark_present"}])
    assert attendance_repo.records == {}
