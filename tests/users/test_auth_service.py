from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.pointage_rh.pointage_rh.core.enums import Role
from src.pointage_rh.pointage_rh.core.exceptions import AuthenticationError, AuthorizationError, StoreUnavailable, ValidationError
from src.pointage_rh.pointage_rh.users.model import User
from src.pointage_rh.pointage_rh.users.service import AuthService, UserService
from src.pointage_rh.pointage_rh.users.session import AuthEvent, SessionContext, SessionUser


@dataclass
class InMemoryUsers:
    users: dict[int, User] = field(default_factory=dict)
    role_error: Optional[Exception] = None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_role_by_email(self, email: str) -> Optional[str]:
        if self.role_error:
            raise self.role_error
        user = self.get_by_email(email)
        return user.role.value if user else None

    def create_user(self, *, email, full_name, password_hash, role) -> int:
        user_id = max(self.users, default=0) + 1
        self.users[user_id] = User(user_id, email, full_name, password_hash, role)
        return user_id

    def delete_by_id(self, user_id: int) -> bool:
        return self.users.pop(user_id, None) is not None

    def list_all(self):
        return list(self.users.values())


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        {
            1: User(1, "admin@pointage.local", "Admin", generate_password_hash("admin123"), Role.ADMIN),
            2: User(2, "rh@pointage.local", "Agent", generate_password_hash("user123"), Role.USER),
            3: User(3, "old@pointage.local", "Ancien", generate_password_hash("old123"), Role.USER, is_active=False),
        }
    )


def test_sign_in_returns_session_user(users_repo):
    user = AuthService(users_repo).sign_in(" Admin@Pointage.local ", "admin123")

    assert user.user_id == 1
    assert user.role == Role.ADMIN
    assert user.is_admin


@pytest.mark.parametrize(
    "email, password",
    [
        ("admin@pointage.local", "wrong"),
        ("nobody@pointage.local", "admin123"),
        ("old@pointage.local", "old123"),
        ("", ""),
    ],
)
def test_sign_in_rejects_bad_credentials(users_repo, email, password):
    with pytest.raises(AuthenticationError, match="Email ou mot de passe incorrect"):
        AuthService(users_repo).sign_in(email, password)


def test_placeholder_hash_never_matches(users_repo):
    users_repo.users[4] = User(4, "seed@pointage.local", "Seed", "CHANGE_ME", Role.USER)

    with pytest.raises(AuthenticationError):
        AuthService(users_repo).sign_in("seed@pointage.local", "CHANGE_ME")


@pytest.mark.parametrize("error", [StoreUnavailable("timeout"), ValueError("bad role")])
def test_role_lookup_failure_falls_back_to_user(users_repo, error):
    users_repo.role_error = error

    user = AuthService(users_repo).sign_in("admin@pointage.local", "admin123")

    assert user.role == Role.USER


def test_unknown_role_value_falls_back_to_user(users_repo, monkeypatch):
    monkeypatch.setattr(users_repo, "get_role_by_email", lambda email: "superviseur")

    assert AuthService(users_repo).resolve_role("admin@pointage.local") == Role.USER


def test_auth_listeners_and_unsubscribe(users_repo):
    auth = AuthService(users_repo)
    events = []
    unsubscribe = auth.on_auth_state_change(lambda event, user: events.append((event, user and user.user_id)))

    user = auth.sign_in("rh@pointage.local", "user123")
    auth.sign_out(user)
    unsubscribe()
    auth.sign_in("rh@pointage.local", "user123")

    assert events == [(AuthEvent.SIGNED_IN, 2), (AuthEvent.SIGNED_OUT, None)]


def test_failing_listener_does_not_block_sign_in(users_repo):
    auth = AuthService(users_repo)

    def boom(event, user):
        raise RuntimeError("listener down")

    auth.on_auth_state_change(boom)

    assert auth.sign_in("rh@pointage.local", "user123").user_id == 2


def test_session_context_follows_auth_events(users_repo):
    auth = AuthService(users_repo)
    context = SessionContext()
    auth.on_auth_state_change(context.apply)

    auth.sign_in("admin@pointage.local", "admin123")
    assert context.is_authenticated
    assert context.role == Role.ADMIN

    auth.sign_out(context.current)
    assert context.current is None
    assert context.role is None


def test_session_user_round_trip_through_flask_session():
    user = SessionUser(user_id=5, email="a@b.fr", full_name="A B", role=Role.ADMIN)

    assert SessionUser.from_session(user.to_session()) == user
    assert SessionUser.from_session({}) is None
    assert SessionUser.from_session({"user_id": 5, "role": "???"}).role == Role.USER


def test_create_account(users_repo):
    svc = UserService(users_repo)

    user_id = svc.create_account(
        current_role=Role.ADMIN,
        email="New@Pointage.local",
        full_name="Nouvel Agent",
        password="secret1",
    )

    created = users_repo.get_by_id(user_id)
    assert created.email == "new@pointage.local"
    assert created.role == Role.USER
    assert AuthService(users_repo).sign_in("new@pointage.local", "secret1").user_id == user_id


@pytest.mark.parametrize(
    "email, name, password",
    [
        ("rh@pointage.local", "Doublon", "secret1"),
        ("pas-un-email", "X", "secret1"),
        ("x@pointage.local", "", "secret1"),
        ("x@pointage.local", "X", "12345"),
    ],
)
def test_create_account_validation(users_repo, email, name, password):
    with pytest.raises(ValidationError):
        UserService(users_repo).create_account(
            current_role=Role.ADMIN, email=email, full_name=name, password=password
        )


def test_create_account_requires_admin(users_repo):
    with pytest.raises(AuthorizationError):
        UserService(users_repo).create_account(
            current_role=Role.USER, email="x@pointage.local", full_name="X", password="secret1"
        )


def test_delete_user(users_repo):
    svc = UserService(users_repo)

    svc.delete_user(current_role=Role.ADMIN, user_id=2)
    assert users_repo.get_by_id(2) is None

    with pytest.raises(ValidationError):
        svc.delete_user(current_role=Role.ADMIN, user_id=1)
    with pytest.raises(ValidationError):
        svc.delete_user(current_role=Role.ADMIN, user_id=42)
    with pytest.raises(AuthorizationError):
        svc.delete_user(current_role=Role.USER, user_id=3)


def test_session_context_from_flask_session():
    context = SessionContext.from_session({"user_id": 2, "email": "rh@pointage.local", "name": "Agent", "role": "user"})

    assert context.is_authenticated
    assert context.role == Role.USER
    assert SessionContext.from_session({}).current is None
