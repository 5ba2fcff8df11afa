class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data (command text, callback payload) is invalid."""


class AuthorizationError(DomainError):
    """Raised when a chat is not linked to an attendance account."""


class StoreError(DomainError):
    """Raised when the attendance store fails or is unreachable."""
