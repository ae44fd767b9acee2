from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..window import TimeWindow
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in within the grace period."""

    def decide_checkin(self, *, hour: float, window: TimeWindow) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
