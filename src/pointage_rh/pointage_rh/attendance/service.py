from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import format_hhmm
from ..common.events import ChangeFeed
from ..common.qr import parse_scan_payload
from ..core.constants import DEFAULT_RECENT_SCANS_LIMIT, DEFAULT_RECORDED_BY
from ..core.enums import ChangeKind, ScanAction, ScanRejection
from ..core.exceptions import (
    AlreadyClosed,
    DomainError,
    ScanConflict,
    StoreUnavailable,
    UnknownEmployee,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator import AttendanceComputation, compute_attendance
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository
from .window import TimeWindow

logger = logging.getLogger(__name__)

TABLE = "attendance"

_REJECTIONS = (
    (ValidationError, ScanRejection.INVALID_CODE),
    (UnknownEmployee, ScanRejection.UNKNOWN_CODE),
    (AlreadyClosed, ScanRejection.ALREADY_CLOSED),
    (ScanConflict, ScanRejection.CONFLICT),
    (StoreUnavailable, ScanRejection.STORE_UNAVAILABLE),
)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one badge presentation."""

    accepted: bool
    message: str
    action: Optional[ScanAction] = None
    reason: Optional[ScanRejection] = None
    employee: Optional[Employee] = None
    record: Optional[AttendanceRecord] = None
    time: Optional[time] = None
    greeting: Optional[str] = None
    computation: Optional[AttendanceComputation] = None

    def to_dict(self) -> dict:
        out: dict = {"success": self.accepted, "message": self.message}
        if self.reason:
            out["reason"] = self.reason.value
        if self.action:
            out["action"] = self.action.value
        if self.greeting:
            out["greeting"] = self.greeting
        if self.time:
            out["time"] = self.time.strftime("%H:%M:%S")
        if self.employee:
            out["employee"] = {
                "employee_id": self.employee.employee_id,
                "matricule": self.employee.matricule,
                "first_name": self.employee.first_name,
                "last_name": self.employee.last_name,
                "department": self.employee.department,
            }
        if self.computation and not self.computation.is_empty:
            out["status"] = self.computation.status.value
            out["hours_worked"] = self.computation.hours_worked
            out["overtime_hours"] = self.computation.overtime_hours
        return out


class AttendanceService:
    """Turns a scanned badge into a check-in or a check-out.

    Per employee and day: no record -> open (checked in) -> closed (checked
    out). A third scan on the same day is rejected. The insert relies on the
    store's (employee, date) unique key and the closing update only matches
    an open record, so two near-simultaneous scans cannot both succeed.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        window: TimeWindow | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        change_feed: ChangeFeed | None = None,
        recorded_by: str = DEFAULT_RECORDED_BY,
    ):
        self._attendance = attendance
        self._employees = employees
        self._window = window or TimeWindow()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._feed = change_feed
        self._recorded_by = recorded_by

    @property
    def window(self) -> TimeWindow:
        return self._window

    def greeting_for(self, now: datetime) -> str:
        return "Bonjour" if self._window.is_morning(now.time()) else "Bon après-midi"

    def resolve_scan(self, code: str, *, now: datetime | None = None) -> ScanResult:
        """Apply one scan; raises the domain error when the scan is rejected."""

        now = now or datetime.now()
        today = now.date()

        matricule = parse_scan_payload(code)
        if not matricule:
            raise ValidationError("Code QR vide")

        employee = self._employees.get_by_matricule(matricule)
        if not employee:
            raise UnknownEmployee("QR Code non reconnu")

        record = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if record is None:
            return self._check_in(employee, now)
        if record.is_closed:
            raise AlreadyClosed("Pointage déjà complété aujourd'hui")
        return self._check_out(employee, record, now)

    def scan(self, code: str, *, now: datetime | None = None) -> ScanResult:
        """Like resolve_scan, but rejections come back as a ScanResult."""

        try:
            result = self.resolve_scan(code, now=now)
        except DomainError as e:
            reason = next((r for exc_type, r in _REJECTIONS if isinstance(e, exc_type)), None)
            if reason is None:
                raise
            logger.info("Scan rejected (%s): %s", reason.value, e)
            return ScanResult(accepted=False, message=str(e), reason=reason)

        logger.info(
            "Scan accepted: %s %s at %s",
            result.employee.matricule if result.employee else "?",
            result.action.value if result.action else "?",
            format_hhmm(result.time),
        )
        return result

    def _check_in(self, employee: Employee, now: datetime) -> ScanResult:
        current = now.time().replace(microsecond=0)
        computation = compute_attendance(current, None, window=self._window, factory=self._factory)
        morning = self._window.is_morning(current)

        attendance_id = self._attendance.create_checkin(
            employee_id=employee.employee_id,
            work_date=now.date(),
            check_in=current,
            morning=morning,
            status=computation.status,
            note=computation.note,
            recorded_by=self._recorded_by,
        )
        if attendance_id is None:
            raise ScanConflict("Pointage déjà enregistré, veuillez réessayer")

        record = AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee.employee_id,
            work_date=now.date(),
            status=computation.status,
            check_in_morning=current if morning else None,
            check_in_afternoon=None if morning else current,
            note=computation.note,
            recorded_by=self._recorded_by,
        )
        self._publish(ChangeKind.INSERT, attendance_id)

        return ScanResult(
            accepted=True,
            message="Entrée enregistrée",
            action=ScanAction.CHECK_IN,
            employee=employee,
            record=record,
            time=current,
            greeting=self.greeting_for(now),
            computation=computation,
        )

    def _check_out(self, employee: Employee, record: AttendanceRecord, now: datetime) -> ScanResult:
        current = now.time().replace(microsecond=0)
        computation = compute_attendance(record.check_in, current, window=self._window, factory=self._factory)
        morning = self._window.is_morning(current)

        closed = self._attendance.close_record(
            attendance_id=record.attendance_id,
            check_out=current,
            morning=morning,
            hours_worked=computation.hours_worked,
            overtime_hours=computation.overtime_hours,
        )
        if not closed:
            raise AlreadyClosed("Pointage déjà complété aujourd'hui")

        updated = AttendanceRecord(
            attendance_id=record.attendance_id,
            employee_id=record.employee_id,
            work_date=record.work_date,
            status=record.status,
            check_in_morning=record.check_in_morning,
            check_out_morning=current if morning else record.check_out_morning,
            check_in_afternoon=record.check_in_afternoon,
            check_out_afternoon=record.check_out_afternoon if morning else current,
            hours_worked=computation.hours_worked,
            overtime_hours=computation.overtime_hours,
            note=record.note,
            recorded_by=record.recorded_by,
            created_at=record.created_at,
        )
        self._publish(ChangeKind.UPDATE, record.attendance_id)

        return ScanResult(
            accepted=True,
            message="Sortie enregistrée",
            action=ScanAction.CHECK_OUT,
            employee=employee,
            record=updated,
            time=current,
            greeting="Au revoir",
            computation=computation,
        )

    def get_today_record(self, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, today)

    def recent_scans(self, today: date, *, limit: int = DEFAULT_RECENT_SCANS_LIMIT) -> Sequence[AttendanceReportRow]:
        return self._attendance.list_for_date(today, limit=limit)

    def _publish(self, kind: ChangeKind, attendance_id: int) -> None:
        if self._feed:
            self._feed.publish(TABLE, kind, attendance_id)
