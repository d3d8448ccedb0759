"""Exceptions raised by the sales core."""


class SalesError(Exception):
    """Base exception for all sales errors."""

    pass


class ValidationError(SalesError):
    """A required precondition does not hold (e.g. no shipping address)."""

    pass


class NotFoundError(SalesError):
    """A requested product or document does not exist."""

    pass


class DependencyError(SalesError):
    """A storage or network operation failed."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)

    @property
    def details(self) -> str:
        return str(self.cause) if self.cause is not None else ""


class NotificationFailure(DependencyError):
    """The downstream notification could not be delivered.

    Only raised inside the dispatcher, which logs and discards it.
    """

    pass
