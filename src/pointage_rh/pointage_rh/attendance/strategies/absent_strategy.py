from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..window import TimeWindow
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Check-in after the absence threshold counts as a missed morning."""

    def decide_checkin(self, *, hour: float, window: TimeWindow) -> StatusDecision:
        h = int(window.absent_threshold_hour)
        m = int(round((window.absent_threshold_hour - h) * 60))
        return StatusDecision(status=AttendanceStatus.ABSENT, note=f"Arrivée après {h:02d}:{m:02d}")
