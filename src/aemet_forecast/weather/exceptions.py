"""Error types raised by the AEMET client."""

from typing import Optional


class AemetError(Exception):
    """Base class for every error raised by this package.

    Carries optional context so callers can log or display the failure
    without a stack trace.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        target: Optional[str] = None,
        attempts: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target
        self.attempts = attempts

    def with_context(self, operation: str, target: Optional[str] = None) -> "AemetError":
        """Return a copy of this error of the same type, prefixed with operation context.

        Args:
            operation: Name of the public operation that failed
            target: Identifier or name the operation was working on

        Returns:
            New error instance; raise it with ``from`` the original
        """
        prefix = f"{operation}({target})" if target is not None else operation
        return type(self)(
            f"{prefix}: {self.message}",
            operation=operation,
            target=target,
            attempts=self.attempts
        )

    def __str__(self) -> str:
        return self.message


class ConfigError(AemetError):
    """Raised when the client is missing required configuration."""
    pass


class TransportError(AemetError):
    """Raised on connection, timeout or HTTP status failures."""
    pass


class DecodeError(AemetError):
    """Raised when a response body is not valid JSON or does not match the schema."""
    pass


class NotFoundError(AemetError):
    """Raised when a municipality name or identifier has no matching record."""
    pass


class NoDataError(AemetError):
    """Raised when a well-formed response carries zero result elements."""
    pass


class DataUnavailableError(AemetError):
    """Raised when the bundled municipality dataset is missing or corrupt."""
    pass
