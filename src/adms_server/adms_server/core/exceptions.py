class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when request data is empty or malformed."""


class PersistenceError(DomainError):
    """Raised when the storage engine rejects or fails an operation."""
