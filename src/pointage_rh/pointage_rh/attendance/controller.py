from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify, request
from PIL import UnidentifiedImageError

from ..common.datetime_utils import format_hhmm
from ..common.qr import decode_qr_image
from ..common.web import error_response, json_error, login_required
from ..core.enums import ScanRejection
from ..core.exceptions import DomainError
from ..container import Container
from .model import AttendanceReportRow

_SCAN_STATUS = {
    ScanRejection.INVALID_CODE: 400,
    ScanRejection.UNKNOWN_CODE: 404,
    ScanRejection.ALREADY_CLOSED: 409,
    ScanRejection.CONFLICT: 409,
    ScanRejection.STORE_UNAVAILABLE: 503,
}


def row_to_dict(row: AttendanceReportRow) -> dict:
    r = row.record
    return {
        "attendance_id": r.attendance_id,
        "employee_id": row.employee_id,
        "matricule": row.matricule,
        "first_name": row.first_name,
        "last_name": row.last_name,
        "department": row.department,
        "date": r.work_date.isoformat(),
        "status": r.status.value,
        "check_in": format_hhmm(r.check_in),
        "check_out": format_hhmm(r.check_out),
        "hours_worked": r.hours_worked,
        "overtime_hours": r.overtime_hours,
        "note": r.note,
    }


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    def _scan_response(code: str):
        result = svc.scan(code, now=datetime.now())
        if result.accepted:
            return jsonify(result.to_dict()), 200
        return jsonify(result.to_dict()), _SCAN_STATUS.get(result.reason, 400)

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @login_required
    def api_scan():
        data = request.get_json(silent=True) or {}
        return _scan_response(str(data.get("code") or request.form.get("code") or ""))

    @app.route("/api/scan/image", methods=["POST"], endpoint="api_scan_image")
    @login_required
    def api_scan_image():
        file = request.files.get("image")
        if not file:
            return json_error("Fichier image manquant", 400)

        try:
            code = decode_qr_image(file.stream)
        except UnidentifiedImageError:
            return json_error("Image illisible", 400)
        if not code:
            return json_error("Aucun QR code détecté dans l'image", 400)

        return _scan_response(code)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    def api_attendance_today():
        try:
            rows = svc.recent_scans(datetime.now().date(), limit=request.args.get("limit", 10, type=int))
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "records": [row_to_dict(r) for r in rows]})
