class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class InvalidRange(ValidationError):
    """Raised when a date range ends before it starts."""

    code = "INVALID_RANGE"


class InvalidDateRangeError(ValidationError):
    code = "INVALID_DATE_RANGE"


class ZeroWorkingDaysError(ValidationError):
    """Raised instead of dividing by a period with no working days."""

    code = "ZERO_WORKING_DAYS"


class ConflictError(DomainError):
    """Raised when a write would violate a ledger invariant."""

    code = "CONFLICT"


class AlreadyCheckedInError(ConflictError):
    code = "ALREADY_CHECKED_IN"


class NoCheckInError(ConflictError):
    code = "NO_CHECK_IN"


class AlreadyCheckedOutError(ConflictError):
    code = "ALREADY_CHECKED_OUT"


class OverlappingLeaveError(ConflictError):
    code = "OVERLAPPING_LEAVE"


class AlreadyProcessedError(ConflictError):
    code = "ALREADY_PROCESSED"


class AlreadyExistsError(ConflictError):
    code = "ALREADY_EXISTS"


class InvalidTransitionError(ConflictError):
    code = "INVALID_TRANSITION"


class ImmutableRecordError(DomainError):
    """Raised when a write targets a record in a terminal state."""

    code = "IMMUTABLE"


class NotFoundError(DomainError):
    code = "NOT_FOUND"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "UNAUTHORIZED"


class ForbiddenError(AuthorizationError):
    """Raised when the actor does not own the record it acts on."""

    code = "FORBIDDEN"
