from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in_morning: Optional[time] = None
    check_out_morning: Optional[time] = None
    check_in_afternoon: Optional[time] = None
    check_out_afternoon: Optional[time] = None
    hours_worked: float = 0.0
    overtime_hours: float = 0.0
    note: Optional[str] = None
    recorded_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def check_in(self) -> Optional[time]:
        return self.check_in_morning or self.check_in_afternoon

    @property
    def check_out(self) -> Optional[time]:
        return self.check_out_afternoon or self.check_out_morning

    @property
    def is_closed(self) -> bool:
        return self.check_out is not None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports: a record joined with its employee."""

    employee_id: int
    matricule: str
    first_name: str
    last_name: str
    department: Optional[str]
    record: AttendanceRecord
