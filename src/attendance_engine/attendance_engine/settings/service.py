from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from ..common.datetime_utils import parse_time_of_day
from ..common.validators import parse_bool, require_in_range, require_non_empty
from ..core.exceptions import ValidationError
from .model import AttendanceSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

_FIELD_ALIASES = {
    "deadlineHour": "deadline_hour",
    "deadlineMinute": "deadline_minute",
    "autoMarkAbsent": "auto_mark_absent_enabled",
    "autoMarkAbsentTime": "auto_mark_absent_time",
    "halfDayEnabled": "half_day_enabled",
}

_FIELD_NAMES = {field: alias for alias, field in _FIELD_ALIASES.items()}


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self, tenant_id: str) -> AttendanceSettings:
        """Stored settings, or the documented defaults when none were saved."""
        tenant_id = require_non_empty(tenant_id, "tenantId")
        return self._settings.get(tenant_id) or AttendanceSettings(tenant_id=tenant_id)

    def update_settings(self, tenant_id: str, **changes: Any) -> AttendanceSettings:
        current = self.get_settings(tenant_id)

        normalized: dict[str, Any] = {}
        for key, value in changes.items():
            field = _FIELD_ALIASES.get(key, key)
            if field not in _FIELD_ALIASES.values():
                raise ValidationError(f"Unknown setting: {key}")
            normalized[field] = value

        if "deadline_hour" in normalized:
            normalized["deadline_hour"] = require_in_range(normalized["deadline_hour"], "Deadline hour", 0, 23)
        if "deadline_minute" in normalized:
            normalized["deadline_minute"] = require_in_range(normalized["deadline_minute"], "Deadline minute", 0, 59)
        if "auto_mark_absent_time" in normalized:
            parsed = parse_time_of_day(normalized["auto_mark_absent_time"], "autoMarkAbsentTime")
            normalized["auto_mark_absent_time"] = parsed.strftime("%H:%M")
        for flag in ("auto_mark_absent_enabled", "half_day_enabled"):
            if flag in normalized:
                normalized[flag] = parse_bool(normalized[flag], _FIELD_NAMES[flag])

        updated = self._settings.save(replace(current, **normalized))
        logger.info("Attendance settings updated for tenant %s: %s", updated.tenant_id, sorted(normalized))
        return updated
