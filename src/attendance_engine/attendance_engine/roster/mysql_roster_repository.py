from __future__ import annotations

from ..database.session import MySQLSession
from .repository import RosterProvider


class MySQLRosterRepository(RosterProvider):
    def __init__(self, session: MySQLSession):
        self._session = session

    def active_usernames(self, tenant_id: str) -> set[str]:
        rows = self._session.fetch_all(
            """
            SELECT username
            FROM users
            WHERE tenant_id=%s AND is_active=1
            """,
            (tenant_id,),
        )
        return {r["username"] for r in rows}
