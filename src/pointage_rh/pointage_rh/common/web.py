"""Shared helpers for the Flask controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import g, has_request_context, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyClosed,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ScanConflict,
    StoreUnavailable,
    UnknownEmployee,
    ValidationError,
)
from ..users.session import AuthEvent, SessionContext, SessionUser

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (UnknownEmployee, 404),
    (AlreadyClosed, 409),
    (ScanConflict, 409),
    (StoreUnavailable, 503),
    (ValidationError, 400),
)


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: DomainError):
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, exc_type):
            if status >= 500:
                logger.error("Store failure: %s", exc)
            return json_error(str(exc), status)
    return json_error(str(exc), 400)


def _persist_session(event: AuthEvent, user: Optional[SessionUser]) -> None:
    session.clear()
    if user is not None:
        session.update(user.to_session())


def session_context() -> SessionContext:
    """The signed-in user of this request, loaded once from the cookie session.

    Sign-in/sign-out applied to it are written back to the Flask session.
    """

    context = g.get("session_context")
    if context is None:
        context = SessionContext.from_session(session)
        context.subscribe(_persist_session)
        g.session_context = context
    return context


def follow_auth_events(event: AuthEvent, user: Optional[SessionUser]) -> None:
    """AuthService listener: apply sign-in/sign-out to the current request's context."""
    if has_request_context():
        session_context().apply(event, user)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session_context().is_authenticated:
            return json_error("Veuillez vous connecter pour continuer", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        context = session_context()
        if not context.is_authenticated:
            return json_error("Veuillez vous connecter pour continuer", 401)
        if context.role != Role.ADMIN:
            return json_error("Accès réservé aux administrateurs", 403)
        return view(*args, **kwargs)

    return wrapper


def current_user() -> Optional[SessionUser]:
    return session_context().current


def current_role() -> Role:
    user = current_user()
    return user.role if user else Role.USER


def json_body() -> dict:
    return request.get_json(silent=True) or request.form.to_dict() or {}
