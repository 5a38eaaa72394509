"""Domain exceptions raised by services and dependencies.

Services raise these to signal business-rule violations. Nothing in the
routers catches them: GlobalExceptionMiddleware classifies each one into a
status code and answers with the standard error envelope
{"success": false, "error": {"message": ..., "traceId": ..., "timestamp": ...}}.

The builtin bases (ValueError, LookupError) let the middleware treat library
errors of the same nature the same way.
"""


class DomainError(Exception):
    """Base class for all domain exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(DomainError, ValueError):
    """Raised when caller-supplied input is unusable."""


class NotFoundError(DomainError, LookupError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class UnauthorizedError(DomainError):
    """Raised when the caller is not authenticated or the token is unusable."""


class InvalidOperationError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. duplicate)."""
