from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from ..core.enums import Role

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    email: str
    full_name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "name": self.full_name,
            "role": self.role.value,
        }

    @classmethod
    def from_session(cls, data: Mapping[str, Any]) -> Optional["SessionUser"]:
        if "user_id" not in data:
            return None
        try:
            role = Role(data.get("role"))
        except ValueError:
            role = Role.USER
        return cls(
            user_id=int(data["user_id"]),
            email=str(data.get("email", "")),
            full_name=str(data.get("name", "")),
            role=role,
        )


AuthListener = Callable[[AuthEvent, Optional[SessionUser]], None]


class SessionContext:
    """Explicit holder of the signed-in user, passed to whoever needs it.

    Listeners are told about every sign-in/sign-out applied to this context.
    """

    def __init__(self, current: Optional[SessionUser] = None):
        self._current = current
        self._lock = threading.Lock()
        self._listeners: list[AuthListener] = []

    @property
    def current(self) -> Optional[SessionUser]:
        return self._current

    @property
    def is_authenticated(self) -> bool:
        return self._current is not None

    @property
    def role(self) -> Optional[Role]:
        return self._current.role if self._current else None

    def apply(self, event: AuthEvent, user: Optional[SessionUser]) -> None:
        with self._lock:
            self._current = user if event == AuthEvent.SIGNED_IN else None
            listeners = list(self._listeners)
        for listener in listeners:
            listener(event, self._current)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @classmethod
    def from_session(cls, data: Mapping[str, Any]) -> "SessionContext":
        return cls(SessionUser.from_session(data))
