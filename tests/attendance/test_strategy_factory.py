from datetime import time

import pytest

from src.pointage_rh.pointage_rh.attendance.factory import AttendanceStrategyFactory
from src.pointage_rh.pointage_rh.attendance.strategies.absent_strategy import AbsentStrategy
from src.pointage_rh.pointage_rh.attendance.strategies.late_strategy import LateStrategy
from src.pointage_rh.pointage_rh.attendance.strategies.present_strategy import PresentStrategy
from src.pointage_rh.pointage_rh.attendance.window import TimeWindow
from src.pointage_rh.pointage_rh.core.exceptions import ValidationError


def test_factory_checkin_within_tolerance():
    strategy = AttendanceStrategyFactory().for_checkin(hour=8.5, window=TimeWindow())

    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_late_after_tolerance():
    strategy = AttendanceStrategyFactory().for_checkin(hour=8 + 31 / 60, window=TimeWindow())

    assert isinstance(strategy, LateStrategy)


def test_factory_checkin_absent_after_threshold():
    strategy = AttendanceStrategyFactory().for_checkin(hour=9.25, window=TimeWindow())

    assert isinstance(strategy, AbsentStrategy)


def test_window_from_settings():
    window = TimeWindow.from_mapping(
        {
            "STANDARD_START": "07:30",
            "LATE_THRESHOLD_MINUTES": "10",
            "ABSENT_THRESHOLD_HOUR": "8.5",
            "OVERTIME_START_HOUR": 17,
            "MIDDAY": "13:00",
        }
    )

    assert window.standard_start == time(7, 30)
    assert window.late_limit_hour == pytest.approx(7 + 40 / 60)
    assert window.absent_threshold_hour == 8.5
    assert window.overtime_start_hour == 17.0
    assert window.is_morning(time(12, 30))


def test_window_defaults_when_settings_missing():
    assert TimeWindow.from_mapping(None) == TimeWindow()


@pytest.mark.parametrize(
    "settings",
    [
        {"STANDARD_START": "eight"},
        {"LATE_THRESHOLD_MINUTES": "abc"},
        {"LATE_THRESHOLD_MINUTES": -5},
    ],
)
def test_window_rejects_bad_settings(settings):
    with pytest.raises(ValidationError):
        TimeWindow.from_mapping(settings)
