from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest

from src.pointage_rh.pointage_rh.attendance.model import AttendanceRecord, AttendanceReportRow
from src.pointage_rh.pointage_rh.core.enums import AttendanceStatus, ContractType
from src.pointage_rh.pointage_rh.employees.model import Employee


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id: dict[int, Employee] = {e.employee_id: e for e in employees}
        self._next_id = max(self._by_id, default=0) + 1
        self.deleted: list[int] = []

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_by_matricule(self, matricule: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.matricule == matricule), None)

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda e: (e.first_name, e.last_name))

    def create_employee(self, *, matricule, first_name, last_name, department, contract_type, monthly_salary) -> int:
        employee_id = self._next_id
        self._next_id += 1
        self._by_id[employee_id] = Employee(
            employee_id=employee_id,
            matricule=matricule,
            first_name=first_name,
            last_name=last_name,
            department=department,
            contract_type=contract_type,
            monthly_salary=monthly_salary,
        )
        return employee_id

    def update_employee(self, *, employee_id, first_name, last_name, department, contract_type, monthly_salary) -> bool:
        current = self._by_id.get(int(employee_id))
        if not current:
            return False
        self._by_id[current.employee_id] = replace(
            current,
            first_name=first_name,
            last_name=last_name,
            department=department,
            contract_type=contract_type,
            monthly_salary=monthly_salary,
        )
        return True

    def set_photo_url(self, employee_id: int, photo_url: Optional[str]) -> bool:
        current = self._by_id.get(int(employee_id))
        if not current:
            return False
        self._by_id[current.employee_id] = replace(current, photo_url=photo_url)
        return True

    def delete_by_id(self, employee_id: int) -> bool:
        if self._by_id.pop(int(employee_id), None) is None:
            return False
        self.deleted.append(int(employee_id))
        return True


class InMemoryAttendance:
    """Mimics the store's (employee, date) unique key and conditional close."""

    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self._next_id = 1

    def add(self, record: AttendanceRecord) -> None:
        self._by_key[(record.employee_id, record.work_date)] = record
        self._next_id = max(self._next_id, record.attendance_id + 1)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_key.get((employee_id, work_date))

    def create_checkin(self, *, employee_id, work_date, check_in, morning, status, note=None, recorded_by=None):
        if (employee_id, work_date) in self._by_key:
            return None
        attendance_id = self._next_id
        self._next_id += 1
        self._by_key[(employee_id, work_date)] = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            work_date=work_date,
            status=status,
            check_in_morning=check_in if morning else None,
            check_in_afternoon=None if morning else check_in,
            note=note,
            recorded_by=recorded_by,
            created_at=datetime.combine(work_date, check_in),
        )
        return attendance_id

    def close_record(self, *, attendance_id, check_out, morning, hours_worked, overtime_hours) -> bool:
        for key, record in self._by_key.items():
            if record.attendance_id == attendance_id and not record.is_closed:
                column = "check_out_morning" if morning else "check_out_afternoon"
                self._by_key[key] = replace(
                    record,
                    hours_worked=hours_worked,
                    overtime_hours=overtime_hours,
                    **{column: check_out},
                )
                return True
        return False

    def _row(self, record: AttendanceRecord) -> AttendanceReportRow:
        e = self._employees.get_by_id(record.employee_id)
        return AttendanceReportRow(
            employee_id=e.employee_id,
            matricule=e.matricule,
            first_name=e.first_name,
            last_name=e.last_name,
            department=e.department,
            record=record,
        )

    def list_for_date(self, work_date: date, *, limit=None):
        records = [r for (_, d), r in self._by_key.items() if d == work_date]
        records.sort(key=lambda r: (r.created_at or datetime.min, r.attendance_id), reverse=True)
        rows = [self._row(r) for r in records]
        return rows[:limit] if limit is not None else rows

    def get_report_rows(self, *, start_date, end_date, employee_id=None):
        records = [
            r
            for (eid, d), r in self._by_key.items()
            if start_date <= d <= end_date and (employee_id is None or eid == employee_id)
        ]
        rows = [self._row(r) for r in records]
        rows.sort(key=lambda row: (row.record.work_date, row.last_name, row.first_name))
        return rows


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 8, 15, 0)


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(
                employee_id=1,
                matricule="EMP001",
                first_name="Aïcha",
                last_name="Benali",
                department="Production",
                contract_type=ContractType.CDI,
                monthly_salary=Decimal("4000"),
            ),
            Employee(
                employee_id=2,
                matricule="EMP002",
                first_name="Karim",
                last_name="Haddad",
                department="Logistique",
                contract_type=ContractType.CDD,
                monthly_salary=Decimal("3000"),
            ),
        ]
    )


@pytest.fixture
def attendance_repo(employees_repo) -> InMemoryAttendance:
    return InMemoryAttendance(employees_repo)


def make_record(attendance_id, employee_id, work_date, check_in, check_out=None, status=AttendanceStatus.PRESENT):
    """Closed afternoon check-out unless the check-out is before midday."""
    morning_out = check_out is not None and check_out < time(12, 0)
    return AttendanceRecord(
        attendance_id=attendance_id,
        employee_id=employee_id,
        work_date=work_date,
        status=status,
        check_in_morning=check_in if check_in < time(12, 0) else None,
        check_in_afternoon=check_in if check_in >= time(12, 0) else None,
        check_out_morning=check_out if morning_out else None,
        check_out_afternoon=check_out if check_out is not None and not morning_out else None,
    )


@pytest.fixture
def record_factory():
    return make_record
