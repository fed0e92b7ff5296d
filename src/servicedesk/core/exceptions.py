class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFound(DomainError):
    """Raised when a referenced record does not exist."""


class InvalidTransition(DomainError):
    """Raised when a record is not in the status an action expects.

    Also covers lost races: the guarded update matched no row because
    another actor changed the status first.
    """


class BackendUnavailable(DomainError):
    """Raised when the database cannot be reached or the query fails."""
