from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ContractType
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_matricule(self, matricule: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create_employee(
        self,
        *,
        matricule: str,
        first_name: str,
        last_name: str,
        department: Optional[str],
        contract_type: ContractType,
        monthly_salary: Decimal,
    ) -> int:
        raise NotImplementedError

    def update_employee(
        self,
        *,
        employee_id: int,
        first_name: str,
        last_name: str,
        department: Optional[str],
        contract_type: ContractType,
        monthly_salary: Decimal,
    ) -> bool:
        raise NotImplementedError

    def set_photo_url(self, employee_id: int, photo_url: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError
