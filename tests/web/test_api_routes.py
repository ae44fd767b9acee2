from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.pointage_rh.pointage_rh.advances.service import SalaryAdvanceService
from src.pointage_rh.pointage_rh.attendance.service import AttendanceService
from src.pointage_rh.pointage_rh.common.events import ChangeFeed
from src.pointage_rh.pointage_rh.common.web import follow_auth_events
from src.pointage_rh.pointage_rh.core.enums import Role
from src.pointage_rh.pointage_rh.employees.service import EmployeeService
from src.pointage_rh.pointage_rh.main import create_app
from src.pointage_rh.pointage_rh.payroll.service import (
    DailyReportService,
    MonthlyReportService,
    PayrollSettingsService,
)
from src.pointage_rh.pointage_rh.users.model import User
from src.pointage_rh.pointage_rh.users.service import AuthService, UserService
from src.pointage_rh.pointage_rh.users.session import AuthEvent


class InMemoryUsers:
    def __init__(self):
        self.users = {
            1: User(1, "admin@pointage.local", "Admin", generate_password_hash("admin123"), Role.ADMIN),
            2: User(2, "rh@pointage.local", "Agent", generate_password_hash("user123"), Role.USER),
        }

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_role_by_email(self, email: str) -> Optional[str]:
        user = self.get_by_email(email)
        return user.role.value if user else None

    def list_all(self):
        return list(self.users.values())


class NoSettings:
    def get(self):
        return None

    def save_hourly_rate(self, hourly_rate):
        pass


class NoAdvances:
    def list_all(self, *, requested_by=None):
        return []


@pytest.fixture
def client(monkeypatch, tmp_path, attendance_repo, employees_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    feed = ChangeFeed()
    users = InMemoryUsers()
    container = SimpleNamespace(
        upload_dir=tmp_path,
        auth_service=AuthService(users),
        user_service=UserService(users),
        employee_service=EmployeeService(employees_repo, change_feed=feed),
        attendance_service=AttendanceService(attendance_repo, employees_repo, change_feed=feed),
        daily_report_service=DailyReportService(attendance_repo, change_feed=feed),
        monthly_report_service=MonthlyReportService(attendance_repo, NoSettings()),
        payroll_settings_service=PayrollSettingsService(NoSettings(), change_feed=feed),
        advance_service=SalaryAdvanceService(NoAdvances(), employees_repo, change_feed=feed),
    )
    app = create_app(container)
    return app.test_client()


def _login(client, email="rh@pointage.local", password="user123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_protected_routes_need_login(client):
    assert client.post("/api/scan", json={"code": "EMP001"}).status_code == 401
    assert client.get("/api/reports/daily").status_code == 401


def test_login_failure(client):
    response = _login(client, password="nope")

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "message": "Email ou mot de passe incorrect"}


def test_login_me_logout(client):
    assert _login(client).status_code == 200
    assert client.get("/api/auth/me").get_json()["user"]["role"] == "user"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_scan_flow_status_codes(client):
    _login(client)

    first = client.post("/api/scan", json={"code": "EMPLOYEE:EMP001"})
    second = client.post("/api/scan", json={"code": "EMPLOYEE:EMP001"})
    third = client.post("/api/scan", json={"code": "EMPLOYEE:EMP001"})
    unknown = client.post("/api/scan", json={"code": "EMPLOYEE:XXX"})

    assert (first.status_code, first.get_json()["action"]) == (200, "check_in")
    assert (second.status_code, second.get_json()["action"]) == (200, "check_out")
    assert (third.status_code, third.get_json()["reason"]) == (409, "already_closed")
    assert (unknown.status_code, unknown.get_json()["reason"]) == (404, "unknown_code")

    today = client.get("/api/reports/daily").get_json()
    assert today["stats"]["total"] == 1
    assert today["records"][0]["matricule"] == "EMP001"


def test_admin_routes_reject_plain_users(client):
    _login(client)

    assert client.put("/api/settings/overtime", json={"hourly_rate": "20"}).status_code == 403
    assert client.get("/api/users").status_code == 403


def test_admin_updates_overtime_rate(client):
    _login(client, "admin@pointage.local", "admin123")

    response = client.put("/api/settings/overtime", json={"hourly_rate": "-3"})
    assert response.status_code == 400

    response = client.put("/api/settings/overtime", json={"hourly_rate": "22.50"})
    assert response.get_json() == {"success": True, "hourly_rate": "22.50"}


def test_monthly_csv_download(client):
    _login(client)

    response = client.get("/api/reports/monthly.csv?month=2025-03")

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "rapport_mensuel_2025-03.csv" in response.headers["Content-Disposition"]
    assert response.data.startswith(b"\xef\xbb\xbf")


def test_monthly_report_bad_month(client):
    _login(client)

    assert client.get("/api/reports/monthly?month=2025-3x").status_code == 400


def test_badge_png(client):
    _login(client)

    assert client.get("/api/employees/1/badge.png").mimetype == "image/png"
    assert client.get("/api/employees/99/badge.png").status_code == 404


def test_advance_form_false_confirmation_keeps_limit(client):
    _login(client)

    # Employee 1 earns 4000
    response = client.post(
        "/api/advances",
        data={"employee_id": "1", "amount": "3500", "confirm_over_limit": "false"},
    )

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_advance_with_malformed_employee_is_rejected(client):
    _login(client)

    response = client.post("/api/advances", json={"employee_id": "abc", "amount": "100"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Employé invalide"


def test_login_and_logout_rewrite_the_cookie_session(client):
    _login(client, "admin@pointage.local", "admin123")
    with client.session_transaction() as sess:
        assert (sess["user_id"], sess["role"], sess["name"]) == (1, "admin", "Admin")

    client.post("/api/auth/logout")
    with client.session_transaction() as sess:
        assert "user_id" not in sess


def test_sign_in_outside_a_request_is_ignored_by_the_session_listener(caplog):
    auth = AuthService(InMemoryUsers())
    seen = []
    auth.on_auth_state_change(follow_auth_events)
    auth.on_auth_state_change(lambda event, user: seen.append(event))

    auth.sign_in("rh@pointage.local", "user123")

    assert seen == [AuthEvent.SIGNED_IN]
    assert "Auth listener failed" not in caplog.text
