from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AdvanceStatus
from .model import SalaryAdvance


class SalaryAdvanceRepository(Protocol):
    def get_by_id(self, advance_id: int) -> Optional[SalaryAdvance]:
        raise NotImplementedError

    def create_advance(
        self,
        *,
        employee_id: int,
        requested_by: int,
        amount: Decimal,
        reason: Optional[str],
        request_date: date,
        month_applied: str,
    ) -> int:
        raise NotImplementedError

    def decide(
        self,
        *,
        advance_id: int,
        status: AdvanceStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a PENDING advance to `status`. Returns False if it was not pending."""
        raise NotImplementedError

    def list_all(self, *, requested_by: Optional[int] = None) -> Sequence[SalaryAdvance]:
        raise NotImplementedError
