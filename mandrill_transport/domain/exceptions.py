"""Mailer exceptions raised by transports and the message model.

This module defines the exception hierarchy for mail delivery errors, providing
consistent error handling for everything that sits behind ``send()``.
"""

from typing import Any


class MailerException(Exception):
    """Base exception for all mailer-related errors.

    Provides a consistent interface for mailer exceptions with error codes
    and optional contextual details.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error context (dict or list)
    """

    code: str = "MAILER_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | list[Any] | None = None) -> None:
        """Initialize mailer exception.

        Args:
            message: Human-readable error description
            details: Optional additional context about the error
        """
        self.message = message
        self.details = details
        super().__init__(self.message)


class TransportException(MailerException):
    """Raised when a message could not be handed over to the provider.

    Covers both non-200 responses from the provider API and network-level
    failures (timeouts, refused connections, TLS errors). For network
    failures ``status_code`` is None and the original ``httpx`` error is
    chained as ``__cause__``.
    """

    code = "TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


class InvalidArgumentError(MailerException):
    """Raised when a transport or model is built from invalid input.

    Use this exception for construction-time problems such as a missing
    API key.
    """

    code = "INVALID_ARGUMENT"


class LogicError(MailerException):
    """Raised when a message cannot be delivered as assembled.

    Use this exception when an envelope cannot be derived from a message
    (no sender or no recipients).
    """

    code = "LOGIC_ERROR"
