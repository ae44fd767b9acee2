from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.datetime_utils import TimeLike, to_fractional_hour
from ..core.enums import AttendanceStatus
from .factory import AttendanceStrategyFactory
from .window import TimeWindow

_DEFAULT_WINDOW = TimeWindow()
_DEFAULT_FACTORY = AttendanceStrategyFactory()


@dataclass(frozen=True)
class AttendanceComputation:
    status: Optional[AttendanceStatus] = None
    hours_worked: float = 0.0
    overtime_hours: float = 0.0
    note: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.status is None


def _is_missing(value: Optional[TimeLike]) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def compute_attendance(
    check_in: Optional[TimeLike],
    check_out: Optional[TimeLike] = None,
    *,
    window: Optional[TimeWindow] = None,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> AttendanceComputation:
    """Derive status, worked hours and overtime from one day's clock times.

    Without a check-in the result is empty (not clocked in yet). Worked hours
    are the raw span between check-in and check-out, floored at zero; overtime
    is the part of the day past ``overtime_start_hour`` and is *included* in
    ``hours_worked``, not deducted from it. Hours are rounded to hundredths;
    the status is decided on the unrounded check-in hour.

    Raises InvalidTimeFormat for malformed times.
    """

    if _is_missing(check_in):
        return AttendanceComputation()

    window = window or _DEFAULT_WINDOW
    factory = factory or _DEFAULT_FACTORY

    h_in = to_fractional_hour(check_in)
    h_out = None if _is_missing(check_out) else to_fractional_hour(check_out)

    decision = factory.for_checkin(hour=h_in, window=window).decide_checkin(hour=h_in, window=window)

    hours_worked = 0.0
    overtime = 0.0
    if h_out is not None:
        hours_worked = max(0.0, h_out - h_in)
        if h_out > window.overtime_start_hour:
            overtime = max(0.0, h_out - window.overtime_start_hour)

    return AttendanceComputation(
        status=decision.status,
        hours_worked=round(hours_worked, 2),
        overtime_hours=round(overtime, 2),
        note=decision.note,
    )
