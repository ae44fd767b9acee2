from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a dashboard account.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    email: str
    full_name: str
    password_hash: str
    role: Role
    is_active: bool = True
