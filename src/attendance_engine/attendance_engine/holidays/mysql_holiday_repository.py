from __future__ import annotations

from datetime import date
from typing import Optional

from ..database.session import MySQLSession
from .model import Holiday
from .repository import HolidayRepository

_SELECT = "SELECT tenant_id, holiday_date, name, created_by, created_at FROM holidays WHERE tenant_id=%s AND holiday_date=%s"


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, session: MySQLSession):
        self._session = session

    def upsert(self, holiday: Holiday) -> Holiday:
        with self._session.transaction() as cur:
            cur.execute(
                """
                INSERT INTO holidays(tenant_id, holiday_date, name, created_by, created_at)
                VALUES(%s,%s,%s,%s,NOW())
                ON DUPLICATE KEY UPDATE name=VALUES(name)
                """,
                (holiday.tenant_id, holiday.holiday_date, holiday.name, holiday.created_by),
            )
        stored = self.get(holiday.tenant_id, holiday.holiday_date)
        if stored is None:
            raise RuntimeError(f"Upsert of holiday {holiday.holiday_key} did not persist")
        return stored

    def get(self, tenant_id: str, holiday_date: date) -> Optional[Holiday]:
        r = self._session.fetch_one(_SELECT, (tenant_id, holiday_date))
        if not r:
            return None
        return Holiday(
            tenant_id=r["tenant_id"],
            holiday_date=r["holiday_date"],
            name=r["name"],
            created_by=r.get("created_by"),
            created_at=r.get("created_at"),
        )
