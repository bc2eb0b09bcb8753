from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import OrgClock
from .core.constants import DEFAULT_BATCH_MAX_WORKERS, DEFAULT_NOTIFY_TIMEOUT_SECONDS, DEFAULT_ORG_UTC_OFFSET_MINUTES
from .database.session import MySQLSession, MySQLSettings
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .notifications.background import BackgroundNotifier
from .notifications.dispatcher import LoggingDispatcher, NotificationDispatcher, WhatsAppDispatcher
from .reconciliation.auto_absent import AutoAbsentMarker
from .reconciliation.bulk_update import BulkDateRangeUpdater
from .reconciliation.day_update import MultiUserDayUpdater
from .reconciliation.factory import RepairStrategyFactory
from .reconciliation.holiday_reconciler import HolidayReconciler
from .roster.mysql_roster_repository import MySQLRosterRepository
from .roster.repository import RosterProvider
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .summary.service import SummaryAggregator


@dataclass(frozen=True)
class Container:
    clock: OrgClock

    attendance_repo: AttendanceRepository
    holidays_repo: HolidayRepository
    roster: RosterProvider
    settings_repo: SettingsRepository

    notifier: BackgroundNotifier
    attendance_service: AttendanceService
    settings_service: SettingsService
    auto_absent: AutoAbsentMarker
    holiday_reconciler: HolidayReconciler
    bulk_updater: BulkDateRangeUpdater
    day_updater: MultiUserDayUpdater
    summary_service: SummaryAggregator


def build_dispatcher(settings: Mapping[str, Any]) -> NotificationDispatcher:
    token = settings.get("WHATSAPP_API_TOKEN")
    phone_number_id = settings.get("WHATSAPP_PHONE_NUMBER_ID")
    recipient = settings.get("WHATSAPP_RECIPIENT")
    if not (token and phone_number_id and recipient):
        return LoggingDispatcher()
    return WhatsAppDispatcher(
        api_url=str(settings.get("WHATSAPP_API_URL") or "https://graph.facebook.com/v17.0"),
        token=str(token),
        phone_number_id=str(phone_number_id),
        recipient=str(recipient),
        timeout=float(settings.get("NOTIFY_TIMEOUT_SECONDS", DEFAULT_NOTIFY_TIMEOUT_SECONDS)),
    )


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    holidays_repo: HolidayRepository,
    roster: RosterProvider,
    settings_repo: SettingsRepository,
    clock: Optional[OrgClock] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    max_workers: int = DEFAULT_BATCH_MAX_WORKERS,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    clock = clock or OrgClock(DEFAULT_ORG_UTC_OFFSET_MINUTES)
    notifier = BackgroundNotifier(dispatcher or LoggingDispatcher())
    settings_service = SettingsService(settings_repo)

    return Container(
        clock=clock,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        roster=roster,
        settings_repo=settings_repo,
        notifier=notifier,
        attendance_service=AttendanceService(attendance_repo, clock=clock, notifier=notifier),
        settings_service=settings_service,
        auto_absent=AutoAbsentMarker(
            attendance_repo, roster, settings_service, clock=clock, max_workers=max_workers
        ),
        holiday_reconciler=HolidayReconciler(
            attendance_repo,
            holidays_repo,
            roster,
            clock=clock,
            strategy_factory=RepairStrategyFactory(),
            max_workers=max_workers,
        ),
        bulk_updater=BulkDateRangeUpdater(attendance_repo, max_workers=max_workers),
        day_updater=MultiUserDayUpdater(attendance_repo, max_workers=max_workers),
        summary_service=SummaryAggregator(attendance_repo, holidays_repo),
    )


def build_container(*, db_config: dict, settings: Optional[Mapping[str, Any]] = None) -> Container:
    settings = settings or {}
    session = MySQLSession(MySQLSettings.from_mapping(db_config))

    return build_services(
        attendance_repo=MySQLAttendanceRepository(session),
        holidays_repo=MySQLHolidayRepository(session),
        roster=MySQLRosterRepository(session),
        settings_repo=MySQLSettingsRepository(session),
        clock=OrgClock(int(settings.get("ORG_UTC_OFFSET_MINUTES", DEFAULT_ORG_UTC_OFFSET_MINUTES))),
        dispatcher=build_dispatcher(settings),
        max_workers=int(settings.get("BATCH_MAX_WORKERS", DEFAULT_BATCH_MAX_WORKERS)),
    )
