from datetime import date, time

from attendance_engine.attendance.model import AttendanceRecord
from attendance_engine.core.enums import AttendanceStatus, RepairAction
from attendance_engine.reconciliation.factory import RepairStrategyFactory
from attendance_engine.reconciliation.model import HolidayCandidate
from attendance_engine.reconciliation.strategies.absent_strategy import AbsentFlipStrategy
from attendance_engine.reconciliation.strategies.keep_strategy import KeepExistingStrategy
from attendance_engine.reconciliation.strategies.missing_strategy import MissingRecordStrategy

SUNDAY = HolidayCandidate(day=date(2024, 3, 3), name="Sunday", kind="sunday")


def _record(status, **kw):
    return AttendanceRecord(tenant_id="acme", username="alice", work_date=SUNDAY.day, status=status, **kw)


def test_factory_picks_strategy_from_record_state():
    factory = RepairStrategyFactory()

    assert isinstance(factory.for_record(None), MissingRecordStrategy)
    assert isinstance(factory.for_record(_record(AttendanceStatus.ABSENT)), AbsentFlipStrategy)
    for status in (AttendanceStatus.PRESENT, AttendanceStatus.LEAVE, AttendanceStatus.HALF_DAY):
        assert isinstance(factory.for_record(_record(status)), KeepExistingStrategy)


def test_missing_strategy_builds_default_present_record():
    decision = MissingRecordStrategy().decide(tenant_id="acme", username="alice", candidate=SUNDAY, existing=None)

    assert decision.action == RepairAction.CREATE_PRESENT
    assert decision.record.clock_in == time(9, 0)
    assert decision.record.clock_out == time(17, 0)
    assert decision.record.is_holiday is False


def test_absent_flip_keeps_existing_location_and_notes():
    existing = _record(AttendanceStatus.ABSENT, location="Pune", notes="approved by HR", clock_out=time(16, 0))

    decision = AbsentFlipStrategy().decide(tenant_id="acme", username="alice", candidate=SUNDAY, existing=existing)

    assert decision.action == RepairAction.FLIP_TO_PRESENT
    assert decision.record.status == AttendanceStatus.PRESENT
    assert (decision.record.clock_in, decision.record.clock_out) == (time(9, 0), time(16, 0))
    assert decision.record.location == "Pune"
    assert decision.record.notes == "approved by HR"


def test_keep_strategy_takes_no_action():
    decision = KeepExistingStrategy().decide(
        tenant_id="acme", username="alice", candidate=SUNDAY, existing=_record(AttendanceStatus.LEAVE)
    )

    assert decision.action == RepairAction.NONE
    assert decision.record is None
