"""
Authentication module exceptions.

Identity provider failures arrive as machine codes (EMAIL_EXISTS,
INVALID_LOGIN_CREDENTIALS, ...). They are translated into user-facing
messages through IDENTITY_ERROR_MESSAGES; unknown codes pass through
verbatim so the user still sees something.
"""

from typing import Any, Optional

from shared.exceptions import AuthenticationError, ValidationError


UNKNOWN_AUTH_ERROR_MESSAGE = "An unknown authentication error occurred."

_BAD_CREDENTIALS_MESSAGE = (
    "Invalid email or password. Please check your credentials and try again."
)

IDENTITY_ERROR_MESSAGES: dict[str, str] = {
    "EMAIL_EXISTS": (
        "This email is already in use. Please sign in or use a different email."
    ),
    "INVALID_LOGIN_CREDENTIALS": _BAD_CREDENTIALS_MESSAGE,
    "INVALID_PASSWORD": _BAD_CREDENTIALS_MESSAGE,
    "EMAIL_NOT_FOUND": _BAD_CREDENTIALS_MESSAGE,
    "WEAK_PASSWORD": "Your password must be at least 6 characters long.",
}


def identity_error_code(raw_message: Optional[str]) -> Optional[str]:
    """
    Extract the machine code from an identity provider message.

    The provider sometimes appends an explanation, e.g.
    "WEAK_PASSWORD : Password should be at least 6 characters".
    """
    if not raw_message:
        return None
    return raw_message.split(" : ", 1)[0].strip() or None


def identity_error_message(raw_message: Optional[str]) -> str:
    """
    Map an identity provider message to a user-facing message.

    Total: every input produces a message.
    """
    code = identity_error_code(raw_message)
    if code is None:
        return UNKNOWN_AUTH_ERROR_MESSAGE
    return IDENTITY_ERROR_MESSAGES.get(code, raw_message or UNKNOWN_AUTH_ERROR_MESSAGE)


class IdentityProviderError(AuthenticationError):
    """Raised when the identity API rejects a sign-up or sign-in."""

    def __init__(self, raw_message: Optional[str] = None, status_code: Optional[int] = None):
        details: dict[str, Any] = {"provider_message": raw_message}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            identity_error_message(raw_message),
            code=identity_error_code(raw_message) or "IDENTITY_ERROR",
            details=details,
        )


class MissingCredentialsError(ValidationError):
    """Raised when email or password is blank."""

    def __init__(self, message: str = "Email and password are required."):
        super().__init__(message, code="MISSING_CREDENTIALS")
