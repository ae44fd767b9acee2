from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...attendance.model import AttendanceRecord


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_hours(self, record: AttendanceRecord) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime_hours(self, record: AttendanceRecord) -> float:
        raise NotImplementedError

    @abstractmethod
    def overtime_pay(self, hours: float, hourly_rate: Decimal) -> Decimal:
        raise NotImplementedError
