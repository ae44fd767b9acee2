from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.events import ChangeFeed
from ..common.qr import badge_payload, make_qr_png
from ..common.validators import require_non_empty, require_non_negative_amount
from ..core.enums import ChangeKind, ContractType, Role
from ..core.exceptions import AuthorizationError, UnknownEmployee, ValidationError
from .file_store import FileStore
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

TABLE = "employees"


def _parse_contract(value: Any) -> ContractType:
    if isinstance(value, ContractType):
        return value
    try:
        return ContractType(str(value or ContractType.CDI.value).upper())
    except ValueError:
        raise ValidationError("Type de contrat invalide (CDI ou CDD)")


class EmployeeService:
    """Use case: manage employee records, photos and QR badges."""

    def __init__(
        self,
        employees: EmployeeRepository,
        files: Optional[FileStore] = None,
        *,
        change_feed: Optional[ChangeFeed] = None,
    ):
        self._employees = employees
        self._files = files
        self._feed = change_feed

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise UnknownEmployee("Employé non trouvé")
        return employee

    def create_employee(
        self,
        *,
        current_role: Role,
        matricule: str,
        first_name: str,
        last_name: str,
        department: Optional[str] = None,
        contract_type: Any = ContractType.CDI,
        monthly_salary: Any = Decimal("0"),
    ) -> int:
        self._require_admin(current_role)
        matricule = require_non_empty(matricule, "Matricule")
        first_name = require_non_empty(first_name, "Prénom")
        last_name = require_non_empty(last_name, "Nom")
        salary = require_non_negative_amount(monthly_salary, "Salaire mensuel")

        if self._employees.get_by_matricule(matricule):
            raise ValidationError("Ce matricule existe déjà")

        employee_id = self._employees.create_employee(
            matricule=matricule,
            first_name=first_name,
            last_name=last_name,
            department=(department or "").strip() or None,
            contract_type=_parse_contract(contract_type),
            monthly_salary=salary,
        )
        logger.info("Employee %s created (id=%s)", matricule, employee_id)
        self._publish(ChangeKind.INSERT, employee_id)
        return employee_id

    def update_employee(
        self,
        *,
        current_role: Role,
        employee_id: int,
        first_name: str,
        last_name: str,
        department: Optional[str] = None,
        contract_type: Any = ContractType.CDI,
        monthly_salary: Any = Decimal("0"),
    ) -> None:
        self._require_admin(current_role)
        self.get(employee_id)

        updated = self._employees.update_employee(
            employee_id=employee_id,
            first_name=require_non_empty(first_name, "Prénom"),
            last_name=require_non_empty(last_name, "Nom"),
            department=(department or "").strip() or None,
            contract_type=_parse_contract(contract_type),
            monthly_salary=require_non_negative_amount(monthly_salary, "Salaire mensuel"),
        )
        if not updated:
            raise ValidationError("Mise à jour de l'employé échouée")
        self._publish(ChangeKind.UPDATE, employee_id)

    def delete_employee(self, *, current_role: Role, employee_id: int) -> None:
        self._require_admin(current_role)
        employee = self.get(employee_id)

        if not self._employees.delete_by_id(employee_id):
            raise ValidationError("Suppression de l'employé échouée")
        if employee.photo_url and self._files:
            self._files.delete(employee.photo_url)
        logger.info("Employee %s deleted", employee.matricule)
        self._publish(ChangeKind.DELETE, employee_id)

    def set_photo(self, *, current_role: Role, employee_id: int, data: bytes, content_type: str) -> str:
        self._require_admin(current_role)
        if not self._files:
            raise ValidationError("Aucun stockage de fichiers configuré")
        employee = self.get(employee_id)

        url = self._files.upload(data, content_type)
        self._employees.set_photo_url(employee_id, url)
        if employee.photo_url:
            self._files.delete(employee.photo_url)
        self._publish(ChangeKind.UPDATE, employee_id)
        return url

    def badge_payload(self, employee_id: int) -> str:
        return badge_payload(self.get(employee_id).matricule)

    def badge_png(self, employee_id: int) -> bytes:
        return make_qr_png(self.badge_payload(employee_id))

    def _require_admin(self, current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Vous n'avez pas les droits nécessaires")

    def _publish(self, kind: ChangeKind, employee_id: int) -> None:
        if self._feed:
            self._feed.publish(TABLE, kind, employee_id)
