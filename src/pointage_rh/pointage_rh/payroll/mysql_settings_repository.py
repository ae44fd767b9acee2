from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import OvertimeSettings
from .settings_repository import OvertimeSettingsRepository


class MySQLOvertimeSettingsRepository(OvertimeSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[OvertimeSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, hourly_rate, updated_at FROM overtime_settings ORDER BY id LIMIT 1")
            row = fetchone(cur)
            if not row:
                return None
            return OvertimeSettings(
                settings_id=int(row["id"]),
                hourly_rate=Decimal(str(row["hourly_rate"])),
                updated_at=row.get("updated_at"),
            )

    def save_hourly_rate(self, hourly_rate: Decimal) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM overtime_settings ORDER BY id LIMIT 1")
            row = fetchone(cur)
            if row:
                cur.execute(
                    "UPDATE overtime_settings SET hourly_rate=%s, updated_at=NOW() WHERE id=%s",
                    (hourly_rate, int(row["id"])),
                )
            else:
                cur.execute("INSERT INTO overtime_settings(hourly_rate) VALUES(%s)", (hourly_rate,))
