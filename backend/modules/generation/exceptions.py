"""
Generation module exceptions.

The provider answered but declined or returned junk: ProviderError
subclasses, never retried. Network failures stay TransportError.
"""

from typing import Optional

from shared.exceptions import ProviderError, ValidationError


PROVIDER = "gemini"

SAFETY_BLOCKED_MESSAGE = (
    "Your request was blocked for safety reasons. Please revise your input "
    "to comply with our terms of service and avoid generating harmful content."
)


class GenerationValidationError(ValidationError):
    """Raised when a generation input is blank, before any provider call."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            code="GENERATION_VALIDATION_ERROR",
            details={"field": field} if field else None,
        )


class InvalidImageDataError(ValidationError):
    """Raised when an image payload is not a decodable data URL."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_IMAGE_DATA")


class SafetyBlockedError(ProviderError):
    """The provider refused the request on safety grounds."""

    def __init__(self, reason: Optional[str] = None):
        message = SAFETY_BLOCKED_MESSAGE
        if reason:
            message = (
                f"Your request was blocked for safety reasons ({reason}). Please revise "
                "your input to comply with our terms of service and avoid generating "
                "harmful content."
            )
        super().__init__(
            message,
            provider=PROVIDER,
            code="SAFETY_BLOCKED",
            details={"reason": reason} if reason else None,
        )
        self.reason = reason


class MalformedResponseError(ProviderError):
    """The provider's answer was empty or did not match the expected shape."""

    def __init__(self, message: str = "The AI returned an invalid response. Please try again."):
        super().__init__(message, provider=PROVIDER, code="MALFORMED_RESPONSE")


class NoImageReturnedError(ProviderError):
    """An image operation produced no image part."""

    def __init__(self, text: Optional[str] = None):
        if text:
            message = f'The AI did not return an image. Response: "{text}"'
        else:
            message = "The AI did not return an image. Try a different prompt or image."
        super().__init__(
            message,
            provider=PROVIDER,
            code="NO_IMAGE_RETURNED",
            details={"text": text} if text else None,
        )
        self.text = text
