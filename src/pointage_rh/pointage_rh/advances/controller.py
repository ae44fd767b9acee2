from __future__ import annotations

from flask import Flask, jsonify

from ..common.validators import parse_flag
from ..common.web import admin_required, current_role, current_user, error_response, json_body, login_required
from ..core.exceptions import DomainError
from ..container import Container
from .service import summarize


def register(app: Flask, container: Container) -> None:
    svc = container.advance_service

    @app.route("/api/advances", methods=["GET"], endpoint="api_advances")
    @login_required
    def api_advances():
        try:
            advances = svc.list_for(current_role=current_role(), user_id=current_user().user_id)
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "success": True,
                "summary": summarize(advances).to_dict(),
                "advances": [a.to_dict() for a in advances],
            }
        )

    @app.route("/api/advances", methods=["POST"], endpoint="api_advances_create")
    @login_required
    def api_advances_create():
        data = json_body()
        try:
            advance_id = svc.create_advance(
                requested_by=current_user().user_id,
                employee_id=data.get("employee_id"),
                amount=data.get("amount"),
                reason=data.get("reason"),
                confirm_over_limit=parse_flag(data.get("confirm_over_limit")),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "advance_id": advance_id}), 201

    @app.route("/api/advances/<int:advance_id>/approve", methods=["POST"], endpoint="api_advances_approve")
    @admin_required
    def api_advances_approve(advance_id: int):
        try:
            svc.approve(current_role=current_role(), user_id=current_user().user_id, advance_id=advance_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/advances/<int:advance_id>/reject", methods=["POST"], endpoint="api_advances_reject")
    @admin_required
    def api_advances_reject(advance_id: int):
        data = json_body()
        try:
            svc.reject(
                current_role=current_role(),
                user_id=current_user().user_id,
                advance_id=advance_id,
                reason=data.get("reason", ""),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})
