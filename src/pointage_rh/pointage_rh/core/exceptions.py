class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTimeFormat(ValidationError):
    """Raised when a time-of-day value cannot be parsed."""


class AdvanceLimitExceeded(ValidationError):
    """Raised when an advance exceeds the salary ratio without confirmation."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class UnknownEmployee(DomainError):
    """Raised when a scanned code matches no employee."""


class AlreadyClosed(DomainError):
    """Raised when a scan targets a record that is already checked out."""


class ScanConflict(DomainError):
    """Raised when a concurrent scan created today's record first."""


class StoreUnavailable(DomainError):
    """Raised when the underlying data, auth or file store fails."""
