from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .advances.mysql_advance_repository import MySQLSalaryAdvanceRepository
from .advances.service import SalaryAdvanceService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.window import TimeWindow
from .common.events import ChangeFeed
from .core.constants import DEFAULT_RECORDED_BY
from .database.connection import DBConfig, DatabaseConnection
from .employees.file_store import LocalFileStore
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_settings_repository import MySQLOvertimeSettingsRepository
from .payroll.service import DailyReportService, MonthlyReportService, PayrollSettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    change_feed: ChangeFeed
    window: TimeWindow
    upload_dir: Path

    users_repo: MySQLUserRepository
    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    settings_repo: MySQLOvertimeSettingsRepository
    advances_repo: MySQLSalaryAdvanceRepository

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    daily_report_service: DailyReportService
    monthly_report_service: MonthlyReportService
    payroll_settings_service: PayrollSettingsService
    advance_service: SalaryAdvanceService


def build_container(
    *,
    db_config: Mapping[str, Any],
    time_window: Optional[Mapping[str, Any]] = None,
    upload_dir: str | Path = "uploads",
    upload_base_url: str = "/uploads",
    recorded_by: str = DEFAULT_RECORDED_BY,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    window = TimeWindow.from_mapping(time_window)
    feed = ChangeFeed()
    upload_dir = Path(upload_dir).resolve()

    users_repo = MySQLUserRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    settings_repo = MySQLOvertimeSettingsRepository(conn)
    advances_repo = MySQLSalaryAdvanceRepository(conn)

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo)
    employee_service = EmployeeService(
        employees_repo,
        LocalFileStore(upload_dir, upload_base_url),
        change_feed=feed,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        window=window,
        strategy_factory=AttendanceStrategyFactory(),
        change_feed=feed,
        recorded_by=recorded_by,
    )
    daily_report_service = DailyReportService(attendance_repo, change_feed=feed)
    monthly_report_service = MonthlyReportService(
        attendance_repo,
        settings_repo,
        calculator=StandardPayrollCalculator(window),
    )
    payroll_settings_service = PayrollSettingsService(settings_repo, change_feed=feed)
    advance_service = SalaryAdvanceService(advances_repo, employees_repo, change_feed=feed)

    return Container(
        conn=conn,
        change_feed=feed,
        window=window,
        upload_dir=upload_dir,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        advances_repo=advances_repo,
        auth_service=auth_service,
        user_service=user_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        daily_report_service=daily_report_service,
        monthly_report_service=monthly_report_service,
        payroll_settings_service=payroll_settings_service,
        advance_service=advance_service,
    )
