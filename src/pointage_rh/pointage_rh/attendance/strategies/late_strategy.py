from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..window import TimeWindow
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in; the note counts minutes past the standard start."""

    def decide_checkin(self, *, hour: float, window: TimeWindow) -> StatusDecision:
        late_minutes = int(round((hour - window.start_hour) * 60))
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Retard (+{late_minutes} min)")
