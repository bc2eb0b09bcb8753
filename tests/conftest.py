from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from attendance_engine.attendance.model import AttendanceRecord
from attendance_engine.common.datetime_utils import OrgClock
from attendance_engine.container import build_services
from attendance_engine.holidays.model import Holiday
from attendance_engine.settings.model import AttendanceSettings

IST = timezone(timedelta(minutes=330))


class FixedClock(OrgClock):
    def __init__(self, now: datetime):
        super().__init__(330)
        self.current = now

    def now(self) -> datetime:
        return self.current


class InMemoryAttendance:
    """Thread-safe fake honoring the atomic create-if-absent contract."""

    def __init__(self):
        self._lock = threading.Lock()
        self.records: dict[str, AttendanceRecord] = {}
        self.fail_on: set[tuple[str, date]] = set()

    def _check(self, username: str, work_date: date) -> None:
        if (username, work_date) in self.fail_on:
            raise RuntimeError(f"storage unavailable for {username} on {work_date}")

    def get_by_key(self, tenant_id: str, username: str, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            return self.records.get(f"{tenant_id}|{username}|{work_date:%Y-%m-%d}")

    def create_if_absent(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        self._check(record.username, record.work_date)
        with self._lock:
            if record.record_key in self.records:
                return None
            stored = record.with_changes(created_at=datetime(2024, 1, 1), updated_at=datetime(2024, 1, 1))
            self.records[record.record_key] = stored
            return stored

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        self._check(record.username, record.work_date)
        with self._lock:
            self.records[record.record_key] = record
            return record

    def query_by_date_range(self, tenant_id: str, start_date: date, end_date: date, *, username=None):
        with self._lock:
            return [
                r
                for r in self.records.values()
                if r.tenant_id == tenant_id
                and start_date <= r.work_date <= end_date
                and (username is None or r.username == username)
            ]


class InMemoryHolidays:
    def __init__(self):
        self.holidays: dict[tuple[str, date], Holiday] = {}

    def upsert(self, holiday: Holiday) -> Holiday:
        self.holidays[(holiday.tenant_id, holiday.holiday_date)] = holiday
        return holiday

    def get(self, tenant_id: str, holiday_date: date) -> Optional[Holiday]:
        return self.holidays.get((tenant_id, holiday_date))


class InMemoryRoster:
    def __init__(self, users: dict[str, set[str]]):
        self.users = users

    def active_usernames(self, tenant_id: str) -> set[str]:
        return set(self.users.get(tenant_id, set()))


class InMemorySettings:
    def __init__(self):
        self.saved: dict[str, AttendanceSettings] = {}

    def get(self, tenant_id: str) -> Optional[AttendanceSettings]:
        return self.saved.get(tenant_id)

    def save(self, settings: AttendanceSettings) -> AttendanceSettings:
        self.saved[settings.tenant_id] = settings
        return settings


class RecordingDispatcher:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def notify_remote_work(self, username, event, timestamp):
        self.calls.append((username, event, timestamp))
        if self.fail:
            raise ConnectionError("provider down")


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 4, 10, 30, tzinfo=IST))


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def holidays_repo():
    return InMemoryHolidays()


@pytest.fixture
def roster():
    return InMemoryRoster({"acme": {"alice", "bob", "carol"}, "globex": {"zed"}})


@pytest.fixture
def settings_repo():
    return InMemorySettings()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def container(attendance_repo, holidays_repo, roster, settings_repo, clock, dispatcher):
    c = build_services(
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        roster=roster,
        settings_repo=settings_repo,
        clock=clock,
        dispatcher=dispatcher,
        max_workers=4,
    )
    yield c
    c.notifier.close()
