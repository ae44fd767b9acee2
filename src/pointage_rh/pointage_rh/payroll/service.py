from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..common.csv_export import write_csv
from ..common.datetime_utils import format_hhmm, parse_month
from ..common.events import ChangeEvent, ChangeFeed
from ..common.validators import require_non_negative_amount
from ..core.enums import AttendanceStatus, ChangeKind, Role
from ..core.exceptions import AuthorizationError
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .settings_repository import OvertimeSettingsRepository

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "À l'heure",
    AttendanceStatus.LATE: "Retard",
    AttendanceStatus.ABSENT: "Absent",
}

SUMMARY_HEADERS = [
    "Nom",
    "Prénom",
    "Département",
    "Jours travaillés",
    "Jours à l'heure",
    "Jours en retard",
    "Total heures",
    "Heures supplémentaires",
]

DETAILED_HEADERS = [
    "Nom",
    "Prénom",
    "Département",
    "Date",
    "Arrivée Matin",
    "Sortie Pause",
    "Retour PM",
    "Sortie Soir",
    "Heures",
    "H. Sup.",
    "Statut",
]


@dataclass(frozen=True)
class DailyStats:
    work_date: date
    present: int = 0
    late: int = 0
    absent: int = 0

    @property
    def total(self) -> int:
        return self.present + self.late + self.absent

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "total": self.total,
        }


@dataclass
class EmployeeMonthSummary:
    employee_id: int
    matricule: str
    first_name: str
    last_name: str
    department: Optional[str]
    total_days: int = 0
    present_days: int = 0
    late_days: int = 0
    absent_days: int = 0
    total_hours: float = 0.0
    total_overtime: float = 0.0
    overtime_pay: Decimal = Decimal("0.00")
    details: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "matricule": self.matricule,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "department": self.department,
            "total_days": self.total_days,
            "present_days": self.present_days,
            "late_days": self.late_days,
            "absent_days": self.absent_days,
            "total_hours": f"{self.total_hours:.2f}",
            "total_overtime": f"{self.total_overtime:.2f}",
            "overtime_pay": str(self.overtime_pay),
            "details": self.details,
        }


@dataclass(frozen=True)
class MonthlyReport:
    month: str
    hourly_rate: Decimal
    summaries: list[EmployeeMonthSummary]


def _detail(row: AttendanceReportRow, calculator: PayrollCalculator) -> dict:
    r = row.record
    return {
        "date": r.work_date.isoformat(),
        "status": r.status.value,
        "check_in_morning": format_hhmm(r.check_in_morning),
        "check_out_morning": format_hhmm(r.check_out_morning),
        "check_in_afternoon": format_hhmm(r.check_in_afternoon),
        "check_out_afternoon": format_hhmm(r.check_out_afternoon),
        "hours_worked": calculator.worked_hours(r),
        "overtime_hours": calculator.overtime_hours(r),
    }


class DailyReportService:
    """Today's dashboard: status counts and the latest scans.

    Counts are cached per day and dropped whenever the attendance table
    changes.
    """

    def __init__(self, attendance: AttendanceRepository, *, change_feed: Optional[ChangeFeed] = None):
        self._attendance = attendance
        self._lock = threading.Lock()
        self._cache: dict[date, DailyStats] = {}
        self._generation = 0
        if change_feed:
            change_feed.subscribe("attendance", self._on_attendance_change)

    def _on_attendance_change(self, event: ChangeEvent) -> None:
        with self._lock:
            self._generation += 1
            self._cache.clear()

    def stats_for(self, work_date: date) -> DailyStats:
        with self._lock:
            cached = self._cache.get(work_date)
            generation = self._generation
        if cached is not None:
            return cached

        counts = {status: 0 for status in AttendanceStatus}
        for row in self._attendance.list_for_date(work_date):
            counts[row.record.status] += 1

        stats = DailyStats(
            work_date=work_date,
            present=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=counts[AttendanceStatus.ABSENT],
        )
        with self._lock:
            # a change landed while counting: the result may already be stale
            if generation == self._generation:
                self._cache[work_date] = stats
        return stats

    def today(
        self, work_date: date, *, limit: Optional[int] = None
    ) -> tuple[DailyStats, Sequence[AttendanceReportRow]]:
        """Counts for `work_date` plus its records, most recent first."""
        return self.stats_for(work_date), self._attendance.list_for_date(work_date, limit=limit)


class MonthlyReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        settings: Optional[OvertimeSettingsRepository] = None,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._settings = settings
        self._calculator = calculator or StandardPayrollCalculator()

    def build_monthly_report(self, *, month: str, employee_id: Optional[int] = None) -> MonthlyReport:
        start, end = parse_month(month)
        rows = self._attendance.get_report_rows(start_date=start, end_date=end, employee_id=employee_id)
        hourly_rate = self._hourly_rate()

        summary_map: dict[int, EmployeeMonthSummary] = {}
        for row in rows:
            s = summary_map.get(row.employee_id)
            if not s:
                s = EmployeeMonthSummary(
                    employee_id=row.employee_id,
                    matricule=row.matricule,
                    first_name=row.first_name,
                    last_name=row.last_name,
                    department=row.department,
                )
                summary_map[row.employee_id] = s

            status = row.record.status
            s.total_days += 1
            if status == AttendanceStatus.PRESENT:
                s.present_days += 1
            elif status == AttendanceStatus.LATE:
                s.late_days += 1
            else:
                s.absent_days += 1

            detail = _detail(row, self._calculator)
            s.total_hours += detail["hours_worked"]
            s.total_overtime += detail["overtime_hours"]
            s.details.append(detail)

        summaries = list(summary_map.values())
        for s in summaries:
            s.total_hours = round(s.total_hours, 2)
            s.total_overtime = round(s.total_overtime, 2)
            s.overtime_pay = self._calculator.overtime_pay(s.total_overtime, hourly_rate)

        summaries.sort(key=lambda x: (x.last_name, x.first_name))
        logger.debug("Monthly report %s: %d employees, %d records", month, len(summaries), len(rows))
        return MonthlyReport(month=start.strftime("%Y-%m"), hourly_rate=hourly_rate, summaries=summaries)

    def summary_csv(self, report: MonthlyReport) -> bytes:
        return write_csv(
            SUMMARY_HEADERS,
            (
                [
                    s.last_name,
                    s.first_name,
                    s.department or "",
                    s.total_days,
                    s.present_days,
                    s.late_days,
                    f"{s.total_hours:.2f}",
                    f"{s.total_overtime:.2f}",
                ]
                for s in report.summaries
            ),
        )

    def detailed_csv(self, report: MonthlyReport) -> bytes:
        rows = []
        for s in report.summaries:
            for d in s.details:
                rows.append(
                    [
                        s.last_name,
                        s.first_name,
                        s.department or "",
                        d["date"],
                        d["check_in_morning"],
                        d["check_out_morning"],
                        d["check_in_afternoon"],
                        d["check_out_afternoon"],
                        f"{d['hours_worked']:.2f}",
                        f"{d['overtime_hours']:.2f}",
                        STATUS_LABELS.get(AttendanceStatus(d["status"]), d["status"]),
                    ]
                )
        return write_csv(DETAILED_HEADERS, rows)

    def _hourly_rate(self) -> Decimal:
        if not self._settings:
            return Decimal("0")
        settings = self._settings.get()
        return settings.hourly_rate if settings else Decimal("0")


class PayrollSettingsService:
    """Use case: read/update the overtime hourly rate (admin)."""

    def __init__(self, settings: OvertimeSettingsRepository, *, change_feed: Optional[ChangeFeed] = None):
        self._settings = settings
        self._feed = change_feed

    def get_hourly_rate(self) -> Decimal:
        settings = self._settings.get()
        return settings.hourly_rate if settings else Decimal("0")

    def update_hourly_rate(self, *, current_role: Role, hourly_rate) -> Decimal:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Vous n'avez pas les droits nécessaires")

        rate = require_non_negative_amount(hourly_rate, "Tarif horaire")
        self._settings.save_hourly_rate(rate)
        logger.info("Overtime hourly rate set to %s", rate)
        if self._feed:
            self._feed.publish("overtime_settings", ChangeKind.UPDATE)
        return rate
