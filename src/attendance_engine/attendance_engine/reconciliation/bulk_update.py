from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Union

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.service import parse_status
from ..common.datetime_utils import iter_dates, parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_CLOCK_IN, DEFAULT_LOCATION, DEFAULT_UPDATED_BY
from ..core.enums import AttendanceStatus, WorkMode
from ..core.exceptions import ValidationError
from .batch import run_isolated
from .model import BulkUpdateResult

logger = logging.getLogger(__name__)


class BulkDateRangeUpdater:
    """Admin override: set one user's status for every date of a range."""

    def __init__(self, attendance: AttendanceRepository, *, max_workers: int = 1):
        self._attendance = attendance
        self._max_workers = max_workers

    def _apply_to_date(
        self,
        tenant_id: str,
        username: str,
        day: date,
        status: AttendanceStatus,
        location: str,
        updated_by: str,
    ) -> str:
        present = status == AttendanceStatus.PRESENT
        existing = self._attendance.get_by_key(tenant_id, username, day)

        if existing is None:
            created = self._attendance.create_if_absent(
                AttendanceRecord(
                    tenant_id=tenant_id,
                    username=username,
                    work_date=day,
                    status=status,
                    work_mode=WorkMode.OFFICE,
                    clock_in=DEFAULT_CLOCK_IN if present else None,
                    location=location,
                    updated_by=updated_by,
                )
            )
            if created is not None:
                return "created"
            # Someone wrote the day in between; treat it as an update.
            existing = self._attendance.get_by_key(tenant_id, username, day)
            if existing is None:
                raise RuntimeError("record vanished after a conflicting create")

        if present:
            clock_in = existing.clock_in or DEFAULT_CLOCK_IN
            clock_out = existing.clock_out if existing.clock_out and existing.clock_out >= clock_in else None
        else:
            clock_in = clock_out = None

        self._attendance.upsert(
            existing.with_changes(
                status=status,
                location=location,
                updated_by=updated_by,
                clock_in=clock_in,
                clock_out=clock_out,
            )
        )
        return "updated"

    def bulk_date_update(
        self,
        tenant_id: str,
        username: str,
        start_date: Union[str, date],
        end_date: Union[str, date],
        status: Union[str, AttendanceStatus],
        location: Optional[str] = None,
        updated_by: Optional[str] = None,
    ) -> BulkUpdateResult:
        tenant_id = require_non_empty(tenant_id, "tenantId")
        username = require_non_empty(username, "username")
        start = parse_iso_date(start_date, "startDate")
        end = parse_iso_date(end_date, "endDate")
        if start > end:
            raise ValidationError(
                "Start date must be before or equal to end date",
                [{"field": "startDate", "message": "Start date must be before or equal to end date"}],
            )
        status = parse_status(status)
        location = optional_text(location) or DEFAULT_LOCATION
        updated_by = optional_text(updated_by) or DEFAULT_UPDATED_BY

        days = list(iter_dates(start, end))
        logger.info(
            "Bulk update for %s/%s: %s..%s (%d days) -> %s",
            tenant_id,
            username,
            start,
            end,
            len(days),
            status.value,
        )

        outcome = run_isolated(
            days,
            lambda day: self._apply_to_date(tenant_id, username, day, status, location, updated_by),
            max_workers=self._max_workers,
            label="bulk-date-update",
        )

        result = BulkUpdateResult(days_processed=len(days))
        for _, kind in outcome.succeeded:
            if kind == "created":
                result.records_created += 1
            else:
                result.records_updated += 1
        result.skipped_days = [
            {"date": failure.item.strftime("%Y-%m-%d"), "error": failure.error} for failure in outcome.failed
        ]

        logger.info(
            "Bulk update done for %s: %d created, %d updated, %d skipped",
            username,
            result.records_created,
            result.records_updated,
            len(result.skipped_days),
        )
        return result
