from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from src.pointage_rh.pointage_rh.common.events import ChangeFeed
from src.pointage_rh.pointage_rh.core.enums import AttendanceStatus, ChangeKind, Role
from src.pointage_rh.pointage_rh.core.exceptions import AuthorizationError, ValidationError
from src.pointage_rh.pointage_rh.payroll.model import OvertimeSettings
from src.pointage_rh.pointage_rh.payroll.service import (
    DailyReportService,
    MonthlyReportService,
    PayrollSettingsService,
)


class InMemoryOvertimeSettings:
    def __init__(self, hourly_rate=None):
        self.current = (
            OvertimeSettings(settings_id=1, hourly_rate=Decimal(hourly_rate), updated_at=None)
            if hourly_rate is not None
            else None
        )

    def get(self):
        return self.current

    def save_hourly_rate(self, hourly_rate):
        self.current = OvertimeSettings(settings_id=1, hourly_rate=hourly_rate, updated_at=datetime(2025, 3, 1))


@pytest.fixture
def march(attendance_repo, record_factory):
    d1, d2 = date(2025, 3, 3), date(2025, 3, 4)
    attendance_repo.add(record_factory(1, 1, d1, time(8, 0), time(19, 30)))
    attendance_repo.add(record_factory(2, 1, d2, time(8, 40), time(17, 0), status=AttendanceStatus.LATE))
    attendance_repo.add(record_factory(3, 2, d1, time(9, 15), time(18, 30), status=AttendanceStatus.ABSENT))
    # Another month: never part of the March report
    attendance_repo.add(record_factory(4, 2, date(2025, 4, 1), time(8, 0), time(17, 0)))
    return attendance_repo


def test_monthly_report_aggregates_per_employee(march):
    svc = MonthlyReportService(march, InMemoryOvertimeSettings("20"))
    report = svc.build_monthly_report(month="2025-03")

    assert report.month == "2025-03"
    assert [s.last_name for s in report.summaries] == ["Benali", "Haddad"]

    benali, haddad = report.summaries
    assert (benali.total_days, benali.present_days, benali.late_days, benali.absent_days) == (2, 1, 1, 0)
    assert benali.total_hours == pytest.approx(19.83)
    assert benali.total_overtime == 1.5
    assert benali.overtime_pay == Decimal("30.00")

    assert haddad.absent_days == 1
    assert haddad.total_hours == 9.25
    assert haddad.total_overtime == 0.5
    assert haddad.overtime_pay == Decimal("10.00")


def test_monthly_report_for_one_employee(march):
    report = MonthlyReportService(march).build_monthly_report(month="2025-03", employee_id=2)

    assert [s.employee_id for s in report.summaries] == [2]
    assert report.hourly_rate == Decimal("0")
    assert report.summaries[0].overtime_pay == Decimal("0.00")


@pytest.mark.parametrize("month", ["2025-13", "03-2025", "", "mars"])
def test_monthly_report_rejects_bad_month(march, month):
    with pytest.raises(ValidationError):
        MonthlyReportService(march).build_monthly_report(month=month)


def test_summary_csv(march):
    svc = MonthlyReportService(march)
    payload = svc.summary_csv(svc.build_monthly_report(month="2025-03"))

    assert payload.startswith(b"\xef\xbb\xbf")
    lines = payload.decode("utf-8-sig").splitlines()
    assert lines[0] == (
        '"Nom","Prénom","Département","Jours travaillés","Jours à l\'heure",'
        '"Jours en retard","Total heures","Heures supplémentaires"'
    )
    assert lines[1] == '"Benali","Aïcha","Production","2","1","1","19.83","1.50"'


def test_detailed_csv(march, attendance_repo, record_factory):
    attendance_repo.add(record_factory(5, 2, date(2025, 3, 5), time(8, 10)))
    svc = MonthlyReportService(march)
    lines = svc.detailed_csv(svc.build_monthly_report(month="2025-03")).decode("utf-8-sig").splitlines()

    assert len(lines) == 1 + 4
    assert '"Benali","Aïcha","Production","2025-03-04","08:40","-","-","17:00","8.33","0.00","Retard"' in lines
    assert '"Haddad","Karim","Logistique","2025-03-05","08:10","-","-","-","0.00","0.00","À l\'heure"' in lines


def test_daily_stats_cached_until_attendance_changes(attendance_repo, record_factory):
    feed = ChangeFeed()
    day = date(2025, 3, 10)
    attendance_repo.add(record_factory(1, 1, day, time(8, 0)))
    svc = DailyReportService(attendance_repo, change_feed=feed)

    assert svc.stats_for(day).present == 1

    attendance_repo.add(record_factory(2, 2, day, time(8, 45), status=AttendanceStatus.LATE))
    assert svc.stats_for(day).late == 0

    feed.publish("attendance", ChangeKind.INSERT, 2)
    stats = svc.stats_for(day)
    assert (stats.present, stats.late, stats.absent, stats.total) == (1, 1, 0, 2)


def test_daily_stats_not_cached_when_attendance_changes_mid_count(attendance_repo, record_factory):
    feed = ChangeFeed()
    day = date(2025, 3, 10)
    attendance_repo.add(record_factory(1, 1, day, time(8, 0)))

    class ScanDuringCount:
        def __init__(self):
            self.pending = True

        def list_for_date(self, work_date, *, limit=None):
            rows = attendance_repo.list_for_date(work_date, limit=limit)
            if self.pending:
                self.pending = False
                attendance_repo.add(record_factory(2, 2, day, time(8, 5)))
                feed.publish("attendance", ChangeKind.INSERT, 2)
            return rows

    svc = DailyReportService(ScanDuringCount(), change_feed=feed)

    assert svc.stats_for(day).present == 1
    assert svc.stats_for(day).present == 2


def test_daily_today_returns_records(attendance_repo, record_factory):
    day = date(2025, 3, 10)
    attendance_repo.add(record_factory(1, 1, day, time(8, 0)))
    stats, rows = DailyReportService(attendance_repo).today(day)

    assert stats.to_dict() == {"date": "2025-03-10", "present": 1, "late": 0, "absent": 0, "total": 1}
    assert [r.matricule for r in rows] == ["EMP001"]


def test_update_hourly_rate_admin_only():
    repo = InMemoryOvertimeSettings("15")
    feed = ChangeFeed()
    seen = []
    feed.subscribe("overtime_settings", seen.append)
    svc = PayrollSettingsService(repo, change_feed=feed)

    with pytest.raises(AuthorizationError):
        svc.update_hourly_rate(current_role=Role.USER, hourly_rate="30")

    assert svc.update_hourly_rate(current_role=Role.ADMIN, hourly_rate="30.5") == Decimal("30.5")
    assert svc.get_hourly_rate() == Decimal("30.5")
    assert len(seen) == 1


@pytest.mark.parametrize("rate", ["-1", "abc", None, ""])
def test_update_hourly_rate_rejects_invalid(rate):
    svc = PayrollSettingsService(InMemoryOvertimeSettings())

    with pytest.raises(ValidationError):
        svc.update_hourly_rate(current_role=Role.ADMIN, hourly_rate=rate)


def test_hourly_rate_defaults_to_zero():
    assert PayrollSettingsService(InMemoryOvertimeSettings()).get_hourly_rate() == Decimal("0")
