from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.validators import parse_flag
from ..common.web import (
    admin_required,
    current_role,
    current_user,
    error_response,
    follow_auth_events,
    json_body,
    json_error,
    login_required,
)
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container
from .model import User


def user_to_dict(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role.value,
        "is_active": user.is_active,
    }


def register(app: Flask, container: Container) -> None:
    container.auth_service.on_auth_state_change(follow_auth_events)

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        try:
            s_user = container.auth_service.sign_in(data.get("email", ""), data.get("password", ""))
        except DomainError as e:
            return error_response(e)

        # the sign-in listener has already rewritten the session
        session.permanent = parse_flag(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        return jsonify({"success": True, "user": s_user.to_session()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        container.auth_service.sign_out(current_user())
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def api_me():
        return jsonify({"success": True, "user": current_user().to_session()})

    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    @admin_required
    def api_users():
        try:
            users = container.user_service.list_users()
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "users": [user_to_dict(u) for u in users]})

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @admin_required
    def api_users_create():
        data = json_body()
        try:
            role = Role(data.get("role") or Role.USER.value)
        except ValueError:
            return json_error("Rôle invalide", 400)

        try:
            user_id = container.user_service.create_account(
                current_role=current_role(),
                email=data.get("email", ""),
                full_name=data.get("full_name", ""),
                password=data.get("password", ""),
                role=role,
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_users_delete")
    @admin_required
    def api_users_delete(user_id: int):
        try:
            container.user_service.delete_user(current_role=current_role(), user_id=user_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True})
