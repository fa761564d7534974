"""
Authentication module.

Handles email/password sign-up and sign-in, session persistence and
transparent token refresh.

Public API:
- IAuthClient / ISessionStore: Interfaces for auth operations
- AuthClient: Identity Toolkit implementation
- SessionStore: Local persistence of the session
- UserSession: The signed-in principal
- Auth exceptions: IdentityProviderError, MissingCredentialsError
"""

from .interfaces import IAuthClient, ISessionStore
from .models import AuthMode, Credentials, UserSession
from .service import AuthClient, TOKEN_REFRESH_MARGIN
from .session_store import SessionStore
from .exceptions import (
    IdentityProviderError,
    MissingCredentialsError,
    identity_error_message,
)

__all__ = [
    # Interfaces
    "IAuthClient",
    "ISessionStore",
    # Implementations
    "AuthClient",
    "SessionStore",
    "TOKEN_REFRESH_MARGIN",
    # Models
    "AuthMode",
    "Credentials",
    "UserSession",
    # Exceptions
    "IdentityProviderError",
    "MissingCredentialsError",
    "identity_error_message",
]
