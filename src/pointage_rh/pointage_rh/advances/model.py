from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AdvanceStatus


@dataclass(frozen=True)
class SalaryAdvance:
    advance_id: int
    employee_id: int
    requested_by: int
    amount: Decimal
    request_date: date
    month_applied: str
    status: AdvanceStatus = AdvanceStatus.PENDING
    reason: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == AdvanceStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "advance_id": self.advance_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "requested_by": self.requested_by,
            "amount": str(self.amount),
            "reason": self.reason,
            "request_date": self.request_date.isoformat(),
            "month_applied": self.month_applied,
            "status": self.status.value,
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejection_reason": self.rejection_reason,
        }
