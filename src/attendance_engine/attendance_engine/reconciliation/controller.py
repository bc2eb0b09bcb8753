from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import actor, json_api, ok, request_json, tenant_id
from ..common.validators import parse_bool, require_string_list
from ..core.constants import MAX_BULK_RANGE_DAYS
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/auto-absent", methods=["POST"], endpoint="api_attendance_auto_absent")
    @json_api
    def auto_absent():
        data = request_json()
        active = data.get("activeUsernames")
        records = container.auto_absent.mark_auto_absent(
            tenant_id(),
            data.get("date"),
            require_string_list(active, "activeUsernames") if active is not None else None,
        )
        return ok(
            [r.to_dict() for r in records],
            message=f"{len(records)} users marked absent",
        )

    @app.route("/api/attendance/holidays", methods=["POST"], endpoint="api_attendance_mark_holiday")
    @json_api
    def mark_holiday():
        data = request_json()
        result = container.holiday_reconciler.mark_holiday(
            tenant_id(),
            data.get("date"),
            data.get("holidayName"),
            mark_all_present=parse_bool(data.get("markAllPresent", False), "markAllPresent"),
            marked_by=actor(),
        )
        return ok(result.to_dict(), 201, message="Holiday marked successfully")

    @app.route("/api/attendance/fix-past-holidays", methods=["POST"], endpoint="api_attendance_fix_past_holidays")
    @json_api
    def fix_past_holidays():
        report = container.holiday_reconciler.fix_past_holiday_attendance(tenant_id())
        return ok(report.to_dict(), message=f"Fixed {report.issues_fixed} attendance records")

    @app.route("/api/attendance/bulk-date-update", methods=["POST"], endpoint="api_attendance_bulk_date_update")
    @json_api
    def bulk_date_update():
        data = request_json()
        start = parse_iso_date(data.get("startDate"), "startDate")
        end = parse_iso_date(data.get("endDate"), "endDate")
        if (end - start).days + 1 > MAX_BULK_RANGE_DAYS:
            raise ValidationError(f"Date range cannot exceed {MAX_BULK_RANGE_DAYS} days")

        result = container.bulk_updater.bulk_date_update(
            tenant_id(),
            data.get("username"),
            start,
            end,
            data.get("status"),
            location=data.get("location"),
            updated_by=actor(),
        )
        return ok(result.to_dict(), message=f"Updated {result.days_processed} days")

    @app.route("/api/attendance/bulk-update", methods=["POST"], endpoint="api_attendance_bulk_update")
    @json_api
    def bulk_update():
        data = request_json()
        result = container.day_updater.bulk_update(
            tenant_id(),
            data.get("date"),
            data.get("operations"),
            updated_by=actor(),
        )
        summary = result.to_dict()["summary"]
        return ok(
            result.to_dict(),
            message=f"Bulk operation completed: {summary['successful']} successful, {summary['failed']} failed",
        )
