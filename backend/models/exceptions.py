"""
Domain exceptions for the contact endpoint.

Services raise these; the centralized handlers in main.py turn them into an
HTTP status plus an `{"error": ...}` body. Each exception carries a
correlation ID so a visitor's report can be matched to the server log.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message returned to the caller.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class ValidationException(DomainException):
    """Raised when a request body is unusable."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when the caller may not perform the operation."""

    pass


class ServiceException(DomainException):
    """Raised when a downstream dependency fails."""

    pass


class MissingFieldsException(ValidationException):
    """name, email or message absent from a contact submission."""

    def __init__(self, message: str = "Missing fields", correlation_id: str | None = None):
        super().__init__(message, correlation_id)


class MethodNotAllowedException(DomainException):
    """Contact endpoint called with something other than POST."""

    def __init__(
        self,
        method: str,
        allowed: tuple[str, ...] = ("POST",),
        correlation_id: str | None = None,
    ):
        self.method = method
        self.allowed = allowed
        super().__init__("Method not allowed", correlation_id)


class BotVerificationFailedException(PermissionDeniedException):
    """Turnstile token missing, rejected, or unverifiable."""

    def __init__(
        self, message: str = "Bot verification failed", correlation_id: str | None = None
    ):
        super().__init__(message, correlation_id)


class RateLimitExceededException(DomainException):
    """Caller address used up its submissions for the current window."""

    def __init__(
        self,
        retry_after: int | None = None,
        message: str = "Too many requests",
        correlation_id: str | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, correlation_id)


class EmailDeliveryException(ServiceException):
    """The mail relay refused, failed, or timed out."""

    def __init__(
        self, message: str = "Failed to send email", correlation_id: str | None = None
    ):
        super().__init__(message, correlation_id)
