from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} est obligatoire")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name}: {min_len} caractères minimum")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name).lower()
    local, _, domain = value.partition("@")
    if not local or "." not in domain:
        raise ValidationError(f"{field_name} invalide")
    return value


def parse_amount(value: Any, field_name: str) -> Decimal:
    """Parse a money amount (string, int, float or Decimal) into Decimal."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} est obligatoire")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} invalide")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} invalide")
    return amount


def require_positive_amount(value: Any, field_name: str) -> Decimal:
    amount = parse_amount(value, field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} doit être supérieur à 0")
    return amount


def require_non_negative_amount(value: Any, field_name: str) -> Decimal:
    amount = parse_amount(value, field_name)
    if amount < 0:
        raise ValidationError(f"{field_name} ne peut pas être négatif")
    return amount


_TRUE_FLAGS = {"1", "true", "on", "yes", "oui"}


def parse_flag(value: Any) -> bool:
    """Checkbox/JSON flag: only True or an explicit "true"-like string counts."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_FLAGS
    return value == 1
