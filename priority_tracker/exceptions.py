"""Custom exceptions for the priority tracker.

Services raise these; the API layer maps each one to an HTTP status and an
``{"error": message}`` body.
"""


class TrackerError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(TrackerError):
    """Raised when no authenticated principal is present."""

    status_code = 401


class ForbiddenError(TrackerError):
    """Raised when a role or ownership rule denies the operation."""

    status_code = 403


class NotFoundError(TrackerError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ValidationError(TrackerError):
    """Raised for missing or malformed input."""

    status_code = 400


class DuplicateEmailError(ValidationError):
    """Raised when an email already belongs to a different user."""

    pass


class WeakCredentialError(ValidationError):
    """Raised when a password is shorter than the configured minimum."""

    pass


class InvariantViolationError(TrackerError):
    """Raised when an operation would break a system invariant (e.g. last admin)."""

    status_code = 400
