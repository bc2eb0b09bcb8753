from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Union

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import OrgClock, parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_ORG_UTC_OFFSET_MINUTES, SYSTEM_ACTOR
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..roster.repository import RosterProvider
from ..settings.service import SettingsService
from .batch import run_isolated

logger = logging.getLogger(__name__)


class AutoAbsentMarker:
    """End-of-day job that fills missing day records as absent.

    Re-running after a partial failure only fills the remaining gaps; existing
    records are never touched, whatever their status.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        roster: RosterProvider,
        settings: SettingsService,
        *,
        clock: Optional[OrgClock] = None,
        max_workers: int = 1,
    ):
        self._attendance = attendance
        self._roster = roster
        self._settings = settings
        self._clock = clock or OrgClock(DEFAULT_ORG_UTC_OFFSET_MINUTES)
        self._max_workers = max_workers

    def _create_absent(self, tenant_id: str, username: str, day: date) -> Optional[AttendanceRecord]:
        record = AttendanceRecord(
            tenant_id=tenant_id,
            username=username,
            work_date=day,
            status=AttendanceStatus.ABSENT,
            work_mode=None,
            clock_in=None,
            clock_out=None,
            updated_by=SYSTEM_ACTOR,
            marked_automatically=True,
        )
        return self._attendance.create_if_absent(record)

    def mark_auto_absent(
        self,
        tenant_id: str,
        work_date: Union[str, date, None] = None,
        active_usernames: Optional[Iterable[str]] = None,
    ) -> list[AttendanceRecord]:
        tenant_id = require_non_empty(tenant_id, "tenantId")
        day = parse_iso_date(work_date, "date") if work_date else self._clock.today()
        if isinstance(active_usernames, str):
            raise ValidationError("activeUsernames must be a list of usernames")
        roster = set(active_usernames) if active_usernames is not None else self._roster.active_usernames(tenant_id)
        if not roster:
            raise ValidationError("List of active usernames is required")

        existing = {r.username for r in self._attendance.query_by_date_range(tenant_id, day, day)}
        missing = sorted(roster - existing)
        logger.info("Auto-absent for tenant %s on %s: %d of %d users missing", tenant_id, day, len(missing), len(roster))

        outcome = run_isolated(
            missing,
            lambda username: self._create_absent(tenant_id, username, day),
            max_workers=self._max_workers,
            label="auto-absent",
        )

        created = [record for _, record in outcome.succeeded if record is not None]
        skipped = len(outcome.succeeded) - len(created)
        logger.info(
            "Auto-absent done for %s: %d created, %d already marked, %d failed",
            day,
            len(created),
            skipped,
            len(outcome.failed),
        )
        return created

    def run_scheduled(self, tenant_id: str, work_date: Union[str, date, None] = None) -> list[AttendanceRecord]:
        """Entry point for the nightly job; honours the organization's auto-absent switch."""
        settings = self._settings.get_settings(tenant_id)
        if not settings.auto_mark_absent_enabled:
            logger.info("Auto-absent disabled for tenant %s; skipping", tenant_id)
            return []
        return self.mark_auto_absent(tenant_id, work_date)
