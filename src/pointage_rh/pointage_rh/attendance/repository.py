from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: time,
        morning: bool,
        status: AttendanceStatus,
        note: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> Optional[int]:
        """Insert today's record.

        Returns None when a record already exists for (employee, date); the
        store's unique key decides, not a prior read.
        """

        raise NotImplementedError

    def close_record(
        self,
        *,
        attendance_id: int,
        check_out: time,
        morning: bool,
        hours_worked: float,
        overtime_hours: float,
    ) -> bool:
        """Set the check-out only if the record is still open."""

        raise NotImplementedError

    def list_for_date(self, work_date: date, *, limit: Optional[int] = None) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
