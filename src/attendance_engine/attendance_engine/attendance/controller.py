from __future__ import annotations

from flask import Flask, request

from ..common.http import actor, json_api, ok, request_json, tenant_id
from ..core.exceptions import ValidationError
from ..container import Container

_EDITABLE_FIELDS = {
    "status": "status",
    "workMode": "work_mode",
    "clockIn": "clock_in",
    "clockOut": "clock_out",
    "location": "location",
    "notes": "notes",
}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_attendance_mark")
    @json_api
    def mark():
        data = request_json()
        record = container.attendance_service.mark(
            tenant_id(),
            data.get("username") or actor(),
            data.get("date") or container.clock.today(),
            data.get("clockIn"),
            work_mode=data.get("workMode"),
            location=data.get("location"),
            notes=data.get("notes"),
            status=data.get("status"),
            updated_by=actor(),
        )
        return ok(record.to_dict(), 201, message="Attendance marked successfully")

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_attendance_clock_out")
    @json_api
    def clock_out():
        data = request_json()
        record = container.attendance_service.clock_out(
            tenant_id(),
            data.get("username") or actor(),
            data.get("date"),
        )
        return ok(record.to_dict(), message="Clocked out successfully")

    @app.route("/api/attendance/record", methods=["PUT"], endpoint="api_attendance_update_record")
    @json_api
    def update_record():
        data = request_json()
        changes = {field: data[key] for key, field in _EDITABLE_FIELDS.items() if key in data}
        if not changes:
            raise ValidationError("No fields to update")
        record = container.attendance_service.update_record(
            tenant_id(),
            data.get("username"),
            data.get("date"),
            updated_by=actor() or "admin",
            **changes,
        )
        return ok(record.to_dict(), message="Attendance record updated")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @json_api
    def today():
        username = request.args.get("username") or actor()
        record = container.attendance_service.get_today_record(tenant_id(), username)
        return ok(record.to_dict() if record else None)

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="api_attendance_summary")
    @json_api
    def summary():
        args = request.args
        if args.get("date") and not args.get("username"):
            daily = container.summary_service.get_daily_summary(tenant_id(), args.get("date"))
            return ok(daily.to_dict())
        result = container.summary_service.get_attendance_summary(
            args.get("username") or actor(),
            tenant_id(),
            args.get("startDate"),
            args.get("endDate"),
        )
        return ok(result.to_dict())

    @app.route("/api/attendance/monthly", methods=["GET"], endpoint="api_attendance_monthly")
    @json_api
    def monthly():
        args = request.args
        today_ = container.clock.today()
        result = container.summary_service.get_monthly_attendance(
            args.get("username") or actor(),
            tenant_id(),
            args.get("year", today_.year),
            args.get("month", today_.month),
        )
        return ok(result.to_dict())

    @app.route("/api/attendance/settings", methods=["GET"], endpoint="api_attendance_settings")
    @json_api
    def get_settings():
        return ok(container.settings_service.get_settings(tenant_id()).to_dict())

    @app.route("/api/attendance/settings", methods=["PUT"], endpoint="api_attendance_settings_update")
    @json_api
    def update_settings():
        data = request_json()
        data.pop("tenantId", None)
        settings = container.settings_service.update_settings(tenant_id(), **data)
        return ok(settings.to_dict(), message="Settings updated")
