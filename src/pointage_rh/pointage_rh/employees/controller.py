from __future__ import annotations

from flask import Flask, jsonify, request, send_from_directory

from ..common.web import admin_required, current_role, error_response, json_body, json_error, login_required
from ..core.exceptions import DomainError
from ..container import Container
from .model import Employee


def employee_to_dict(employee: Employee) -> dict:
    return {
        "employee_id": employee.employee_id,
        "matricule": employee.matricule,
        "first_name": employee.first_name,
        "last_name": employee.last_name,
        "full_name": employee.full_name,
        "department": employee.department,
        "contract_type": employee.contract_type.value,
        "monthly_salary": str(employee.monthly_salary),
        "photo_url": employee.photo_url,
    }


def register(app: Flask, container: Container) -> None:
    svc = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    @login_required
    def api_employees():
        try:
            employees = svc.list_employees()
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "employees": [employee_to_dict(e) for e in employees]})

    @app.route("/api/employees", methods=["POST"], endpoint="api_employees_create")
    @admin_required
    def api_employees_create():
        data = json_body()
        try:
            employee_id = svc.create_employee(
                current_role=current_role(),
                matricule=data.get("matricule", ""),
                first_name=data.get("first_name", ""),
                last_name=data.get("last_name", ""),
                department=data.get("department"),
                contract_type=data.get("contract_type") or "CDI",
                monthly_salary=data.get("monthly_salary", "0"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "employee_id": employee_id}), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="api_employees_update")
    @admin_required
    def api_employees_update(employee_id: int):
        data = json_body()
        try:
            svc.update_employee(
                current_role=current_role(),
                employee_id=employee_id,
                first_name=data.get("first_name", ""),
                last_name=data.get("last_name", ""),
                department=data.get("department"),
                contract_type=data.get("contract_type") or "CDI",
                monthly_salary=data.get("monthly_salary", "0"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="api_employees_delete")
    @admin_required
    def api_employees_delete(employee_id: int):
        try:
            svc.delete_employee(current_role=current_role(), employee_id=employee_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})

    @app.route("/api/employees/<int:employee_id>/photo", methods=["POST"], endpoint="api_employees_photo")
    @admin_required
    def api_employees_photo(employee_id: int):
        file = request.files.get("photo")
        if not file:
            return json_error("Fichier photo manquant", 400)
        try:
            url = svc.set_photo(
                current_role=current_role(),
                employee_id=employee_id,
                data=file.read(),
                content_type=file.mimetype,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "photo_url": url})

    @app.route("/api/employees/<int:employee_id>/badge.png", methods=["GET"], endpoint="api_employees_badge")
    @login_required
    def api_employees_badge(employee_id: int):
        try:
            png = svc.badge_png(employee_id)
        except DomainError as e:
            return error_response(e)
        return app.response_class(png, mimetype="image/png")

    @app.route("/uploads/<path:name>", methods=["GET"], endpoint="uploads")
    def uploads(name: str):
        return send_from_directory(container.upload_dir, name)
