"""
Error taxonomy for album operations.

Routers translate these into HTTP responses; nothing else escapes a service.
"""


class ValidationError(ValueError):
    """Input rejected before any state change or remote call."""


class NotFoundError(LookupError):
    """Target record is not present in the current collection."""


class PersistenceError(RuntimeError):
    """The store rejected every attempt; local state has been rolled back."""

    def __init__(self, operation: str, cause: Exception | None = None):
        super().__init__(f"Unable to {operation}. Please try again.")
        self.operation = operation
        self.cause = cause


class AuthenticationError(Exception):
    """Unknown credentials or an expired/invalid session token."""
