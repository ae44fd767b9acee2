from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_time_of_day
from ..core.constants import (
    DEFAULT_ABSENT_THRESHOLD_HOUR,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_MIDDAY,
    DEFAULT_OVERTIME_START_HOUR,
    DEFAULT_STANDARD_START,
)
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class TimeWindow:
    """Working-day thresholds used to classify a check-in and count overtime."""

    standard_start: time = parse_time_of_day(DEFAULT_STANDARD_START)
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES
    absent_threshold_hour: float = DEFAULT_ABSENT_THRESHOLD_HOUR
    overtime_start_hour: float = DEFAULT_OVERTIME_START_HOUR
    midday: time = parse_time_of_day(DEFAULT_MIDDAY)

    @property
    def start_hour(self) -> float:
        return self.standard_start.hour + self.standard_start.minute / 60

    @property
    def late_limit_hour(self) -> float:
        return self.start_hour + self.late_threshold_minutes / 60

    def is_morning(self, value: time) -> bool:
        return value < self.midday

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "TimeWindow":
        """Build from a settings dict (keys as in config TIME_WINDOW)."""

        data = data or {}
        try:
            window = cls(
                standard_start=parse_time_of_day(data.get("STANDARD_START", DEFAULT_STANDARD_START)),
                late_threshold_minutes=int(data.get("LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES)),
                absent_threshold_hour=float(data.get("ABSENT_THRESHOLD_HOUR", DEFAULT_ABSENT_THRESHOLD_HOUR)),
                overtime_start_hour=float(data.get("OVERTIME_START_HOUR", DEFAULT_OVERTIME_START_HOUR)),
                midday=parse_time_of_day(data.get("MIDDAY", DEFAULT_MIDDAY)),
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Configuration horaire invalide: {e}")

        if window.late_threshold_minutes < 0:
            raise ValidationError("La tolérance de retard ne peut pas être négative")
        return window
