class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when the current attendance state does not allow an action."""


class NotFoundError(DomainError):
    """Raised when an action expects an open session or break that does not exist."""


class LockTimeoutError(ConflictError):
    """Raised when another action for the same employee holds the lock for too long."""


class AggregationError(DomainError):
    """Raised when the daily summary cannot be rebuilt; aborts the transaction."""
