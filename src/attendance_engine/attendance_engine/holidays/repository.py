from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Holiday


class HolidayRepository(Protocol):
    def upsert(self, holiday: Holiday) -> Holiday:
        """Create the holiday row, or rename it when (tenant, date) already exists."""

        raise NotImplementedError

    def get(self, tenant_id: str, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError
