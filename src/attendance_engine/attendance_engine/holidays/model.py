from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Holiday:
    """Domain entity: an organization-wide holiday, keyed by (tenant, date)."""

    tenant_id: str
    holiday_date: date
    name: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def holiday_key(self) -> str:
        return f"{self.tenant_id}|{self.holiday_date.strftime('%Y-%m-%d')}"

    def to_dict(self) -> dict:
        return {
            "id": self.holiday_key,
            "tenantId": self.tenant_id,
            "date": self.holiday_date.strftime("%Y-%m-%d"),
            "name": self.name,
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
