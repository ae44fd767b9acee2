from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ContractType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, matricule, first_name, last_name, department,
    contract_type, monthly_salary, photo_url, created_at
"""


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        matricule=row["matricule"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        department=row.get("department"),
        contract_type=ContractType(row.get("contract_type") or ContractType.CDI.value),
        monthly_salary=Decimal(str(row.get("monthly_salary") or 0)),
        photo_url=row.get("photo_url"),
        created_at=row.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_matricule(self, matricule: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE matricule=%s", (matricule,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY first_name, last_name")
            return [_to_employee(r) for r in fetchall(cur)]

    def create_employee(
        self,
        *,
        matricule: str,
        first_name: str,
        last_name: str,
        department: Optional[str],
        contract_type: ContractType,
        monthly_salary: Decimal,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(matricule, first_name, last_name, department, contract_type, monthly_salary)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (matricule, first_name, last_name, department, contract_type.value, monthly_salary),
            )
            return int(cur.lastrowid)

    def update_employee(
        self,
        *,
        employee_id: int,
        first_name: str,
        last_name: str,
        department: Optional[str],
        contract_type: ContractType,
        monthly_salary: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET first_name=%s, last_name=%s, department=%s, contract_type=%s, monthly_salary=%s
                WHERE employee_id=%s
                """,
                (first_name, last_name, department, contract_type.value, monthly_salary, int(employee_id)),
            )
            return cur.rowcount > 0

    def set_photo_url(self, employee_id: int, photo_url: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET photo_url=%s WHERE employee_id=%s", (photo_url, int(employee_id)))
            return cur.rowcount > 0

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0
