from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, StoreUnavailable, ValidationError
from .model import User
from .repository import UserRepository
from .session import AuthEvent, AuthListener, SessionUser

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: sign users in and out, and tell listeners about it."""

    def __init__(self, users: UserRepository):
        self._users = users
        self._lock = threading.Lock()
        self._listeners: list[AuthListener] = []

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def resolve_role(self, email: str) -> Role:
        """Role by email; any lookup failure falls back to USER.

        Role resolution must never block a sign-in.
        """

        try:
            value = self._users.get_role_by_email(email)
            return Role(value) if value else Role.USER
        except (StoreUnavailable, ValueError) as e:
            logger.warning("Role lookup failed for %s, defaulting to %s: %s", email, Role.USER.value, e)
            return Role.USER

    def sign_in(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Email ou mot de passe incorrect")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Email ou mot de passe incorrect")

        s_user = SessionUser(
            user_id=user.user_id,
            email=user.email,
            full_name=user.full_name,
            role=self.resolve_role(user.email),
        )
        logger.info("User %s signed in (role=%s)", s_user.email, s_user.role.value)
        self._notify(AuthEvent.SIGNED_IN, s_user)
        return s_user

    def sign_out(self, user: Optional[SessionUser] = None) -> None:
        if user:
            logger.info("User %s signed out", user.email)
        self._notify(AuthEvent.SIGNED_OUT, None)

    def _notify(self, event: AuthEvent, user: Optional[SessionUser]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, user)
            except Exception:
                logger.exception("Auth listener failed on %s", event.value)


class UserService:
    """Use case: manage dashboard accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(
        self,
        *,
        current_role: Role,
        email: str,
        full_name: str,
        password: str,
        role: Role = Role.USER,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Vous n'avez pas les droits nécessaires")

        email = require_email(email)
        full_name = require_non_empty(full_name, "Nom complet")
        require_min_length(password, "Mot de passe", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("Cet email est déjà utilisé")

        user_id = self._users.create_user(
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Account %s created with role %s", email, role.value)
        return user_id

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def delete_user(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Vous n'avez pas les droits nécessaires")

        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("Utilisateur introuvable")
        if user.role == Role.ADMIN:
            raise ValidationError("Impossible de supprimer un compte administrateur")

        if not self._users.delete_by_id(user_id):
            raise ValidationError("Suppression de l'utilisateur échouée")
