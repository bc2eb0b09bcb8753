from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..holidays.model import Holiday


@dataclass(frozen=True)
class HolidayCandidate:
    """A date the repair job expects everyone to be present on."""

    day: date
    name: str
    kind: str  # "holiday" | "sunday"

    @property
    def label(self) -> str:
        return "Sunday" if self.kind == "sunday" else "Holiday"

    def to_dict(self) -> dict:
        return {"date": self.day.strftime("%Y-%m-%d"), "name": self.name, "type": self.kind}


@dataclass(frozen=True)
class HolidayMarkResult:
    holiday: Holiday
    users_marked_present: int
    users_failed: int = 0

    def to_dict(self) -> dict:
        return {
            "holiday": self.holiday.to_dict(),
            "usersMarkedPresent": self.users_marked_present,
            "usersFailed": self.users_failed,
        }


@dataclass
class RepairReport:
    dates_checked: int = 0
    issues_found: int = 0
    issues_fixed: int = 0
    holiday_dates: list[dict] = field(default_factory=list)
    summary: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "datesChecked": self.dates_checked,
            "issuesFound": self.issues_found,
            "issuesFixed": self.issues_fixed,
            "holidayDates": list(self.holiday_dates),
            "summary": dict(self.summary),
        }


@dataclass
class BulkUpdateResult:
    days_processed: int = 0
    records_created: int = 0
    records_updated: int = 0
    skipped_days: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "daysProcessed": self.days_processed,
            "recordsCreated": self.records_created,
            "recordsUpdated": self.records_updated,
            "skippedDays": list(self.skipped_days),
        }


@dataclass
class DayUpdateResult:
    """Outcome of one multi-user update for a single date."""

    work_date: date
    results: list[dict] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r["success"])

    @property
    def failed(self) -> int:
        return len(self.results) - self.successful

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.strftime("%Y-%m-%d"),
            "results": list(self.results),
            "summary": {"total": len(self.results), "successful": self.successful, "failed": self.failed},
        }
