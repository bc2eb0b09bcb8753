from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Keyed store of attendance rows.

    Note: ``create_if_absent`` must be atomic on the (tenant, username, date)
    key. It returns ``None`` when a record already exists, which is the only
    way concurrent duplicate writers learn they lost.
    """

    def get_by_key(self, tenant_id: str, username: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(self, record: AttendanceRecord) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    def query_by_date_range(
        self,
        tenant_id: str,
        start_date: date,
        end_date: date,
        *,
        username: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
