"""
Base exception classes for the Filter Fusion backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.

The hierarchy mirrors the error taxonomy used throughout the app:
- ValidationError: missing or malformed input, raised before any network call
- AuthenticationError: the identity provider rejected the credentials
- AuthorizationError: caller lacks a valid credential or the privileged role
- NotFoundError: the target record does not exist
- ProviderError: the AI provider answered but declined or returned junk
- ExternalServiceError / TransportError: network failures and bare non-2xx
"""

from typing import Optional, Any


PERMISSION_DENIED_MESSAGE = "You do not have permission to perform this action."


class FilterFusionError(Exception):
    """
    Base exception for all Filter Fusion errors.

    All custom exceptions should inherit from this class.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(FilterFusionError):
    """Resource not found."""

    pass


class ValidationError(FilterFusionError):
    """Input validation failed."""

    pass


class AuthenticationError(FilterFusionError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(FilterFusionError):
    """Authorization failed (insufficient permissions)."""

    pass


class PermissionDeniedError(AuthorizationError):
    """
    Single user-facing permission failure.

    Raised both for local role checks and for 401/403 answers from
    remote stores, so callers only ever show one message.
    """

    def __init__(
        self,
        message: str = PERMISSION_DENIED_MESSAGE,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code="PERMISSION_DENIED", details=details)


class ProviderError(FilterFusionError):
    """
    The generative provider responded but did not produce usable output.

    Not retryable: repeating the identical request is expected to fail
    the same way.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code or "PROVIDER_ERROR", details)
        self.provider = provider
        self.details["provider"] = provider


class ExternalServiceError(FilterFusionError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class TransportError(ExternalServiceError):
    """Network failure, timeout, or a non-2xx answer without a usable body."""

    retryable = True

    def __init__(
        self,
        service: str,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            f"{service} request failed: {message}",
            service=service,
            code="TRANSPORT_ERROR",
            details={"status_code": status_code} if status_code else None,
        )
        self.status_code = status_code
