from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import month_key
from ..common.events import ChangeFeed
from ..common.validators import require_non_empty, require_positive_amount
from ..core.constants import ADVANCE_SALARY_RATIO
from ..core.enums import AdvanceStatus, ChangeKind, Role
from ..core.exceptions import AdvanceLimitExceeded, AuthorizationError, UnknownEmployee, ValidationError
from ..employees.repository import EmployeeRepository
from .model import SalaryAdvance
from .repository import SalaryAdvanceRepository

logger = logging.getLogger(__name__)

TABLE = "salary_advances"


@dataclass(frozen=True)
class AdvanceSummary:
    pending: int
    approved: int
    approved_total: Decimal

    def to_dict(self) -> dict:
        return {
            "pending": self.pending,
            "approved": self.approved,
            "approved_total": str(self.approved_total),
        }


def summarize(advances: Sequence[SalaryAdvance]) -> AdvanceSummary:
    approved = [a for a in advances if a.status == AdvanceStatus.APPROVED]
    return AdvanceSummary(
        pending=sum(1 for a in advances if a.is_pending),
        approved=len(approved),
        approved_total=sum((a.amount for a in approved), Decimal("0")),
    )


class SalaryAdvanceService:
    """Use case: request, approve and reject salary advances.

    An advance above half the monthly salary is only recorded when the
    requester explicitly confirms it.
    """

    def __init__(
        self,
        advances: SalaryAdvanceRepository,
        employees: EmployeeRepository,
        *,
        change_feed: Optional[ChangeFeed] = None,
        salary_ratio: Decimal = Decimal(ADVANCE_SALARY_RATIO),
    ):
        self._advances = advances
        self._employees = employees
        self._feed = change_feed
        self._ratio = salary_ratio

    def create_advance(
        self,
        *,
        requested_by: int,
        employee_id: Any,
        amount: Any,
        reason: Optional[str] = None,
        confirm_over_limit: bool = False,
        today: Optional[date] = None,
    ) -> int:
        if not employee_id:
            raise ValidationError("Employé est obligatoire")
        amount = require_positive_amount(amount, "Montant")

        try:
            employee_key = int(employee_id)
        except (TypeError, ValueError):
            raise ValidationError("Employé invalide")

        employee = self._employees.get_by_id(employee_key)
        if not employee:
            raise UnknownEmployee("Employé non trouvé")

        limit = employee.monthly_salary * self._ratio
        if amount > limit and not confirm_over_limit:
            raise AdvanceLimitExceeded(
                f"Le montant dépasse {int(self._ratio * 100)}% du salaire mensuel ({limit:.2f})"
            )

        today = today or date.today()
        advance_id = self._advances.create_advance(
            employee_id=employee.employee_id,
            requested_by=requested_by,
            amount=amount,
            reason=(reason or "").strip() or None,
            request_date=today,
            month_applied=month_key(today),
        )
        logger.info("Advance %s requested for %s: %s", advance_id, employee.matricule, amount)
        self._publish(ChangeKind.INSERT, advance_id)
        return advance_id

    def approve(self, *, current_role: Role, user_id: int, advance_id: int, now: Optional[datetime] = None) -> None:
        self._decide(
            current_role=current_role,
            user_id=user_id,
            advance_id=advance_id,
            status=AdvanceStatus.APPROVED,
            now=now,
        )

    def reject(
        self,
        *,
        current_role: Role,
        user_id: int,
        advance_id: int,
        reason: str,
        now: Optional[datetime] = None,
    ) -> None:
        self._decide(
            current_role=current_role,
            user_id=user_id,
            advance_id=advance_id,
            status=AdvanceStatus.REJECTED,
            rejection_reason=reason,
            now=now,
        )

    def list_for(self, *, current_role: Role, user_id: int) -> Sequence[SalaryAdvance]:
        if current_role == Role.ADMIN:
            return self._advances.list_all()
        return self._advances.list_all(requested_by=user_id)

    def _decide(
        self,
        *,
        current_role: Role,
        user_id: int,
        advance_id: int,
        status: AdvanceStatus,
        rejection_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Vous n'avez pas les droits nécessaires")
        if status == AdvanceStatus.REJECTED:
            rejection_reason = require_non_empty(rejection_reason, "Raison du refus")

        advance = self._advances.get_by_id(advance_id)
        if not advance:
            raise ValidationError("Avance introuvable")

        decided = self._advances.decide(
            advance_id=advance_id,
            status=status,
            decided_by=user_id,
            decided_at=now or datetime.now(),
            rejection_reason=rejection_reason,
        )
        if not decided:
            raise ValidationError("Cette avance a déjà été traitée")

        logger.info("Advance %s %s by user %s", advance_id, status.value, user_id)
        self._publish(ChangeKind.UPDATE, advance_id)

    def _publish(self, kind: ChangeKind, advance_id: int) -> None:
        if self._feed:
            self._feed.publish(TABLE, kind, advance_id)
