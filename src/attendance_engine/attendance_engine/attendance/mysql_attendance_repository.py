from __future__ import annotations

from datetime import date, time, timedelta
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus, WorkMode
from ..database.session import MySQLSession
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_key, tenant_id, username, work_date, status, work_mode, clock_in, clock_out,
    location, notes, is_holiday, holiday_name, updated_by, marked_automatically,
    created_at, updated_at
"""

_INSERT = f"""
    INSERT INTO attendance_records({_COLUMNS})
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s, NOW(), NOW())
"""


def _as_time(value: Any) -> Optional[time]:
    # mysql-connector returns TIME columns as timedelta
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    raise TypeError(f"Unsupported TIME value: {value!r}")


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        tenant_id=r["tenant_id"],
        username=r["username"],
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        work_mode=WorkMode(r["work_mode"]) if r.get("work_mode") else None,
        clock_in=_as_time(r.get("clock_in")),
        clock_out=_as_time(r.get("clock_out")),
        location=r.get("location"),
        notes=r.get("notes"),
        is_holiday=bool(r.get("is_holiday")),
        holiday_name=r.get("holiday_name"),
        updated_by=r.get("updated_by"),
        marked_automatically=bool(r.get("marked_automatically")),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _params(record: AttendanceRecord) -> tuple:
    return (
        record.record_key,
        record.tenant_id,
        record.username,
        record.work_date,
        record.status.value,
        record.work_mode.value if record.work_mode else None,
        record.clock_in,
        record.clock_out,
        record.location,
        record.notes,
        int(record.is_holiday),
        record.holiday_name,
        record.updated_by,
        int(record.marked_automatically),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, session: MySQLSession):
        self._session = session

    def _by_record_key(self, record_key: str) -> Optional[AttendanceRecord]:
        r = self._session.fetch_one(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_key=%s", (record_key,))
        return _to_record(r) if r else None

    def get_by_key(self, tenant_id: str, username: str, work_date: date) -> Optional[AttendanceRecord]:
        r = self._session.fetch_one(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE tenant_id=%s AND username=%s AND work_date=%s
            """,
            (tenant_id, username, work_date),
        )
        return _to_record(r) if r else None

    def create_if_absent(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        if not self._session.insert_if_absent(_INSERT, _params(record)):
            return None
        return self._by_record_key(record.record_key)

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._session.transaction() as cur:
            cur.execute(
                _INSERT
                + """
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status), work_mode=VALUES(work_mode),
                    clock_in=VALUES(clock_in), clock_out=VALUES(clock_out),
                    location=VALUES(location), notes=VALUES(notes),
                    is_holiday=VALUES(is_holiday), holiday_name=VALUES(holiday_name),
                    updated_by=VALUES(updated_by), marked_automatically=VALUES(marked_automatically),
                    updated_at=NOW()
                """,
                _params(record),
            )
        stored = self._by_record_key(record.record_key)
        if stored is None:
            raise RuntimeError(f"Upsert of {record.record_key} did not persist")
        return stored

    def query_by_date_range(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        *,
        username: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["tenant_id=%s", "work_date BETWEEN %s AND %s"]
        params: list[object] = [tenant_id, start_date, end_date]

        if username is not None:
            clauses.append("username=%s")
            params.append(username)

        rows = self._session.fetch_all(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE {" AND ".join(clauses)}
            ORDER BY work_date ASC, username ASC
            """,
            params,
        )
        return [_to_record(r) for r in rows]
