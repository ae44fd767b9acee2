from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    ar.attendance_id, ar.employee_id, ar.work_date, ar.status,
    ar.check_in_morning, ar.check_out_morning, ar.check_in_afternoon, ar.check_out_afternoon,
    ar.hours_worked, ar.overtime_hours, ar.note, ar.recorded_by, ar.created_at
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_morning=normalize_mysql_time(r.get("check_in_morning")),
        check_out_morning=normalize_mysql_time(r.get("check_out_morning")),
        check_in_afternoon=normalize_mysql_time(r.get("check_in_afternoon")),
        check_out_afternoon=normalize_mysql_time(r.get("check_out_afternoon")),
        hours_worked=float(r.get("hours_worked") or 0),
        overtime_hours=float(r.get("overtime_hours") or 0),
        note=r.get("note"),
        recorded_by=r.get("recorded_by"),
        created_at=r.get("created_at"),
    )


def _to_report_row(r: Dict[str, Any]) -> AttendanceReportRow:
    return AttendanceReportRow(
        employee_id=int(r["employee_id"]),
        matricule=r["matricule"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        department=r.get("department"),
        record=_to_record(r),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance ar
                WHERE ar.employee_id=%s AND ar.work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        column = "check_in_morning" if morning else "check_in_afternoon"
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    f"""
                    INSERT INTO attendance(employee_id, work_date, {column}, status, note, recorded_by)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (employee_id, work_date, check_in, status.value, note, recorded_by),
                )
            except IntegrityError as e:
                # uq_attendance_employee_date: a concurrent scan won the insert
                if e.errno == errorcode.ER_DUP_ENTRY:
                    return None
                raise
            return int(cur.lastrowid)

    def close_record(
        self,
        *,
        attendance_id: int,
        check_out: time,
        morning: bool,
        hours_worked: float,
        overtime_hours: float,
    ) -> bool:
        column = "check_out_morning" if morning else "check_out_afternoon"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance
                SET {column}=%s, hours_worked=%s, overtime_hours=%s
                WHERE attendance_id=%s
                  AND check_out_morning IS NULL AND check_out_afternoon IS NULL
                """,
                (check_out, hours_worked, overtime_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_date(self, work_date: date, *, limit: Optional[int] = None) -> Sequence[AttendanceReportRow]:
        sql = f"""
            SELECT {_RECORD_COLUMNS}, e.matricule, e.first_name, e.last_name, e.department
            FROM attendance ar
            JOIN employees e ON e.employee_id = ar.employee_id
            WHERE ar.work_date=%s
            ORDER BY ar.created_at DESC, ar.attendance_id DESC
        """
        params: list[object] = [work_date]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_report_row(r) for r in fetchall(cur)]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_id is not None:
            clauses.append("ar.employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}, e.matricule, e.first_name, e.last_name, e.department
                FROM attendance ar
                JOIN employees e ON e.employee_id = ar.employee_id
                WHERE {where}
                ORDER BY ar.work_date ASC, e.last_name ASC, e.first_name ASC
                """,
                tuple(params),
            )
            return [_to_report_row(r) for r in fetchall(cur)]
