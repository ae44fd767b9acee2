from __future__ import annotations

from dataclasses import dataclass

from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy
from .window import TimeWindow


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Thresholds compare with a strict ``>``: a check-in exactly on a limit
    keeps the milder status.
    """

    def for_checkin(self, *, hour: float, window: TimeWindow) -> AttendanceStrategy:
        if hour > window.absent_threshold_hour:
            return AbsentStrategy()
        if hour > window.late_limit_hour:
            return LateStrategy()
        return PresentStrategy()
