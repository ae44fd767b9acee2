from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ...attendance.calculator import compute_attendance
from ...attendance.model import AttendanceRecord
from ...attendance.window import TimeWindow
from .base import PayrollCalculator

CENT = Decimal("0.01")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: figures recomputed from the record's clock times.

    Overtime is paid at the flat hourly rate from the overtime settings.
    """

    def __init__(self, window: Optional[TimeWindow] = None):
        self._window = window or TimeWindow()

    def worked_hours(self, record: AttendanceRecord) -> float:
        return compute_attendance(record.check_in, record.check_out, window=self._window).hours_worked

    def overtime_hours(self, record: AttendanceRecord) -> float:
        return compute_attendance(record.check_in, record.check_out, window=self._window).overtime_hours

    def overtime_pay(self, hours: float, hourly_rate: Decimal) -> Decimal:
        amount = Decimal(str(hours)) * Decimal(hourly_rate)
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
