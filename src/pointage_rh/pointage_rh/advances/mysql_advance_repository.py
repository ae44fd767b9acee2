from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AdvanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SalaryAdvance
from .repository import SalaryAdvanceRepository

_SELECT = """
    SELECT a.advance_id, a.employee_id, a.requested_by, a.amount, a.reason,
           a.request_date, a.month_applied, a.status, a.approved_by, a.approved_at,
           a.rejection_reason, a.created_at,
           CONCAT(e.first_name, ' ', e.last_name) AS employee_name
    FROM salary_advances a
    JOIN employees e ON e.employee_id = a.employee_id
"""


def _to_advance(row: Dict[str, Any]) -> SalaryAdvance:
    return SalaryAdvance(
        advance_id=int(row["advance_id"]),
        employee_id=int(row["employee_id"]),
        requested_by=int(row["requested_by"]),
        amount=Decimal(str(row["amount"])),
        reason=row.get("reason"),
        request_date=row["request_date"],
        month_applied=row["month_applied"],
        status=AdvanceStatus(row["status"]),
        approved_by=row.get("approved_by"),
        approved_at=row.get("approved_at"),
        rejection_reason=row.get("rejection_reason"),
        created_at=row.get("created_at"),
        employee_name=row.get("employee_name"),
    )


class MySQLSalaryAdvanceRepository(SalaryAdvanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, advance_id: int) -> Optional[SalaryAdvance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.advance_id=%s", (int(advance_id),))
            row = fetchone(cur)
            return _to_advance(row) if row else None

    def create_advance(
        self,
        *,
        employee_id: int,
        requested_by: int,
        amount: Decimal,
        reason: Optional[str],
        request_date: date,
        month_applied: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_advances(employee_id, requested_by, amount, reason, request_date, month_applied, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(requested_by),
                    amount,
                    reason,
                    request_date,
                    month_applied,
                    AdvanceStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        advance_id: int,
        status: AdvanceStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_advances
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE advance_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    rejection_reason,
                    int(advance_id),
                    AdvanceStatus.PENDING.value,
                ),
            )
            return cur.rowcount == 1

    def list_all(self, *, requested_by: Optional[int] = None) -> Sequence[SalaryAdvance]:
        sql = _SELECT
        params: tuple = ()
        if requested_by is not None:
            sql += " WHERE a.requested_by=%s"
            params = (int(requested_by),)
        sql += " ORDER BY a.created_at DESC, a.advance_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_advance(r) for r in fetchall(cur)]
