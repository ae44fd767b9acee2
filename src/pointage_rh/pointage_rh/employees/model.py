from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ContractType


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee carrying a QR badge with their matricule."""

    employee_id: int
    matricule: str
    first_name: str
    last_name: str
    department: Optional[str] = None
    contract_type: ContractType = ContractType.CDI
    monthly_salary: Decimal = Decimal("0")
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
