from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    ADMIN = "admin"
    USER = "user"


class AttendanceStatus(str, Enum):
    """Attendance status stored with each daily record."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class ScanAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class ScanRejection(str, Enum):
    """Why a scan did not produce a check-in or check-out."""

    INVALID_CODE = "invalid_code"
    UNKNOWN_CODE = "unknown_code"
    ALREADY_CLOSED = "already_closed"
    CONFLICT = "conflict"
    STORE_UNAVAILABLE = "store_unavailable"


class ContractType(str, Enum):
    CDI = "CDI"
    CDD = "CDD"


class AdvanceStatus(str, Enum):
    """Approval workflow of a salary advance."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ChangeKind(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
