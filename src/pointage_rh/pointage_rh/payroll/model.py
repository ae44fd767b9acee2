from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class OvertimeSettings:
    settings_id: int
    hourly_rate: Decimal
    updated_at: Optional[datetime] = None
