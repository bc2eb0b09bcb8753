from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence, Union

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_CLOCK_IN, DEFAULT_LOCATION, DEFAULT_UPDATED_BY, HALF_DAY_CLOCK_OUT
from ..core.enums import AttendanceStatus, WorkMode
from ..core.exceptions import ValidationError
from .batch import run_isolated
from .model import DayUpdateResult

logger = logging.getLogger(__name__)

# action -> (status, clock_in, clock_out, location)
DAY_ACTIONS = {
    "mark_present": (AttendanceStatus.PRESENT, DEFAULT_CLOCK_IN, None, DEFAULT_LOCATION),
    "mark_absent": (AttendanceStatus.ABSENT, None, None, None),
    "mark_leave": (AttendanceStatus.LEAVE, None, None, None),
    "mark_half_day": (AttendanceStatus.HALF_DAY, DEFAULT_CLOCK_IN, HALF_DAY_CLOCK_OUT, DEFAULT_LOCATION),
}


class MultiUserDayUpdater:
    """Admin batch: apply one action per user for a single date.

    Each operation is written independently; a bad or failing operation is
    reported in its own result entry and the rest still run.
    """

    def __init__(self, attendance: AttendanceRepository, *, max_workers: int = 1):
        self._attendance = attendance
        self._max_workers = max_workers

    def _apply(self, tenant_id: str, day: date, operation: Any, updated_by: str) -> str:
        if not isinstance(operation, dict):
            raise ValidationError("Each operation must be an object")
        username, action = operation.get("username"), operation.get("action")
        if not isinstance(username, str) or not username.strip() or not isinstance(action, str) or not action:
            raise ValidationError("Username and action are required")
        if action not in DAY_ACTIONS:
            raise ValidationError(f"Invalid action: {action}")

        status, clock_in, clock_out, location = DAY_ACTIONS[action]
        changes = dict(status=status, clock_in=clock_in, clock_out=clock_out, location=location, updated_by=updated_by)

        existing = self._attendance.get_by_key(tenant_id, username.strip(), day)
        if existing is None:
            record = AttendanceRecord(
                tenant_id=tenant_id,
                username=username.strip(),
                work_date=day,
                work_mode=WorkMode.OFFICE if clock_in else None,
                **changes,
            )
        else:
            record = existing.with_changes(**changes)
        self._attendance.upsert(record)
        return action

    def bulk_update(
        self,
        tenant_id: str,
        work_date: Union[str, date],
        operations: Sequence[dict],
        *,
        updated_by: Optional[str] = None,
    ) -> DayUpdateResult:
        tenant_id = require_non_empty(tenant_id, "tenantId")
        day = parse_iso_date(work_date, "date")
        if not isinstance(operations, (list, tuple)) or not operations:
            raise ValidationError(
                "Operations array is required",
                [{"field": "operations", "message": "Operations array is required"}],
            )
        updated_by = optional_text(updated_by) or DEFAULT_UPDATED_BY

        outcome = run_isolated(
            list(enumerate(operations)),
            lambda item: self._apply(tenant_id, day, item[1], updated_by),
            max_workers=self._max_workers,
            label="day-update",
        )

        by_index: dict[int, dict] = {}
        for (index, op), action in outcome.succeeded:
            by_index[index] = {"username": op["username"].strip(), "success": True, "action": action}
        for failure in outcome.failed:
            index, op = failure.item
            username = op.get("username") if isinstance(op, dict) else None
            by_index[index] = {"username": username, "success": False, "error": failure.error}

        result = DayUpdateResult(work_date=day, results=[by_index[i] for i in sorted(by_index)])
        logger.info(
            "Bulk attendance update for %s on %s by %s: %d successful, %d failed",
            tenant_id,
            day,
            updated_by,
            result.successful,
            result.failed,
        )
        return result
