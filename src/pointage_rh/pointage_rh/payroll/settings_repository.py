from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol

from .model import OvertimeSettings


class OvertimeSettingsRepository(Protocol):
    def get(self) -> Optional[OvertimeSettings]:
        raise NotImplementedError

    def save_hourly_rate(self, hourly_rate: Decimal) -> None:
        """Update the single settings row, creating it if missing."""

        raise NotImplementedError
