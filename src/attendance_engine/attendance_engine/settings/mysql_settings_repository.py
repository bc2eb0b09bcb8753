from __future__ import annotations

from typing import Optional

from ..database.session import MySQLSession
from .model import AttendanceSettings
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, session: MySQLSession):
        self._session = session

    def get(self, tenant_id: str) -> Optional[AttendanceSettings]:
        r = self._session.fetch_one(
            """
            SELECT tenant_id, deadline_hour, deadline_minute, auto_mark_absent,
                   auto_mark_absent_time, half_day_enabled
            FROM attendance_settings
            WHERE tenant_id=%s
            """,
            (tenant_id,),
        )
        if not r:
            return None
        return AttendanceSettings(
            tenant_id=r["tenant_id"],
            deadline_hour=int(r["deadline_hour"]),
            deadline_minute=int(r["deadline_minute"]),
            auto_mark_absent_enabled=bool(r["auto_mark_absent"]),
            auto_mark_absent_time=str(r["auto_mark_absent_time"]),
            half_day_enabled=bool(r["half_day_enabled"]),
        )

    def save(self, settings: AttendanceSettings) -> AttendanceSettings:
        with self._session.transaction() as cur:
            cur.execute(
                """
                INSERT INTO attendance_settings(
                    tenant_id, deadline_hour, deadline_minute, auto_mark_absent,
                    auto_mark_absent_time, half_day_enabled
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    deadline_hour=VALUES(deadline_hour), deadline_minute=VALUES(deadline_minute),
                    auto_mark_absent=VALUES(auto_mark_absent),
                    auto_mark_absent_time=VALUES(auto_mark_absent_time),
                    half_day_enabled=VALUES(half_day_enabled)
                """,
                (
                    settings.tenant_id,
                    settings.deadline_hour,
                    settings.deadline_minute,
                    int(settings.auto_mark_absent_enabled),
                    settings.auto_mark_absent_time,
                    int(settings.half_day_enabled),
                ),
            )
        return settings
