from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceSettings


class SettingsRepository(Protocol):
    def get(self, tenant_id: str) -> Optional[AttendanceSettings]:
        raise NotImplementedError

    def save(self, settings: AttendanceSettings) -> AttendanceSettings:
        raise NotImplementedError
