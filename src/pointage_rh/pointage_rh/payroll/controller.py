from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify, request

from ..attendance.controller import row_to_dict
from ..common.datetime_utils import month_key, parse_iso_date
from ..common.web import admin_required, current_role, error_response, json_body, login_required
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    daily = container.daily_report_service
    monthly = container.monthly_report_service
    settings = container.payroll_settings_service

    def _month_arg() -> str:
        return request.args.get("month") or month_key(datetime.now().date())

    def _employee_arg():
        return request.args.get("employee_id", type=int)

    def _csv_response(payload: bytes, filename: str):
        return app.response_class(
            payload,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/daily", methods=["GET"], endpoint="api_reports_daily")
    @login_required
    def api_reports_daily():
        try:
            day = request.args.get("date")
            work_date = parse_iso_date(day) if day else datetime.now().date()
            stats, rows = daily.today(work_date, limit=request.args.get("limit", type=int))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "stats": stats.to_dict(), "records": [row_to_dict(r) for r in rows]})

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="api_reports_monthly")
    @login_required
    def api_reports_monthly():
        try:
            report = monthly.build_monthly_report(month=_month_arg(), employee_id=_employee_arg())
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "success": True,
                "month": report.month,
                "hourly_rate": str(report.hourly_rate),
                "employees": [s.to_dict() for s in report.summaries],
            }
        )

    @app.route("/api/reports/monthly.csv", methods=["GET"], endpoint="api_reports_monthly_csv")
    @login_required
    def api_reports_monthly_csv():
        try:
            report = monthly.build_monthly_report(month=_month_arg(), employee_id=_employee_arg())
        except DomainError as e:
            return error_response(e)
        return _csv_response(monthly.summary_csv(report), f"rapport_mensuel_{report.month}.csv")

    @app.route("/api/reports/monthly-detailed.csv", methods=["GET"], endpoint="api_reports_monthly_detailed_csv")
    @login_required
    def api_reports_monthly_detailed_csv():
        try:
            report = monthly.build_monthly_report(month=_month_arg(), employee_id=_employee_arg())
        except DomainError as e:
            return error_response(e)
        return _csv_response(monthly.detailed_csv(report), f"rapport_detaille_{report.month}.csv")

    @app.route("/api/settings/overtime", methods=["GET"], endpoint="api_settings_overtime")
    @login_required
    def api_settings_overtime():
        try:
            rate = settings.get_hourly_rate()
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "hourly_rate": str(rate)})

    @app.route("/api/settings/overtime", methods=["PUT"], endpoint="api_settings_overtime_update")
    @admin_required
    def api_settings_overtime_update():
        data = json_body()
        try:
            rate = settings.update_hourly_rate(current_role=current_role(), hourly_rate=data.get("hourly_rate"))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "hourly_rate": str(rate)})
