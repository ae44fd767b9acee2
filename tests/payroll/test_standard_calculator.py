from datetime import date, time
from decimal import Decimal

from src.pointage_rh.pointage_rh.attendance.model import AttendanceRecord
from src.pointage_rh.pointage_rh.attendance.window import TimeWindow
from src.pointage_rh.pointage_rh.core.enums import AttendanceStatus
from src.pointage_rh.pointage_rh.payroll.calculator.standard_calculator import StandardPayrollCalculator


def _record(**times):
    return AttendanceRecord(
        attendance_id=1,
        employee_id=1,
        work_date=date(2025, 1, 6),
        status=AttendanceStatus.PRESENT,
        # Stored figures are ignored: the calculator recomputes from the clock times
        hours_worked=99.0,
        overtime_hours=99.0,
        **times,
    )


def test_no_lunch_break_deduction():
    record = _record(check_in_morning=time(8, 0), check_out_afternoon=time(17, 0))

    calc = StandardPayrollCalculator()
    assert calc.worked_hours(record) == 9.0
    assert calc.overtime_hours(record) == 0.0


def test_open_record_counts_nothing():
    record = _record(check_in_morning=time(8, 0))

    calc = StandardPayrollCalculator()
    assert calc.worked_hours(record) == 0.0
    assert calc.overtime_hours(record) == 0.0


def test_uses_configured_overtime_start():
    record = _record(check_in_morning=time(8, 0), check_out_afternoon=time(18, 0))

    calc = StandardPayrollCalculator(TimeWindow(overtime_start_hour=17.0))
    assert calc.overtime_hours(record) == 1.0


def test_overtime_pay_rounds_half_up_to_cents():
    calc = StandardPayrollCalculator()

    assert calc.overtime_pay(1.5, Decimal("25")) == Decimal("37.50")
    assert calc.overtime_pay(0.33, Decimal("12.35")) == Decimal("4.08")
    assert calc.overtime_pay(0.0, Decimal("25")) == Decimal("0.00")
