class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when request parameters are malformed."""


class AuthorizationError(DomainError):
    """Raised when the viewer cannot be resolved or lacks permission for a report."""
