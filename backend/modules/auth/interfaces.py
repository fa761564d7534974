"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. This enables testing with mocks and swapping the
persistence backend.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import UserSession


@runtime_checkable
class ISessionStore(Protocol):
    """Local persistence for the signed-in session."""

    def save(self, session: UserSession) -> None:
        """Persist the session, replacing any previous one."""
        ...

    def load(self) -> Optional[UserSession]:
        """Return the persisted session, or None if absent or unreadable."""
        ...

    def clear(self) -> None:
        """Remove the persisted session. Idempotent."""
        ...


@runtime_checkable
class IAuthClient(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def sign_up(self, email: str, password: str) -> UserSession:
        """
        Create an account and start a session.

        Raises:
            MissingCredentialsError: If email or password is blank
            IdentityProviderError: If the identity API rejects the request
            TransportError: If the identity API cannot be reached
        """
        ...

    async def sign_in(self, email: str, password: str) -> UserSession:
        """
        Verify credentials and start a session.

        Raises:
            MissingCredentialsError: If email or password is blank
            IdentityProviderError: If the identity API rejects the request
            TransportError: If the identity API cannot be reached
        """
        ...

    async def get_valid_token(self) -> Optional[str]:
        """
        Return a bearer token valid for at least five more minutes.

        Refreshes first when needed. Returns None when signed out or when
        the refresh fails (which also signs the user out).
        """
        ...

    def current_session(self) -> Optional[UserSession]:
        """Return the persisted session without refreshing it."""
        ...

    def sign_out(self) -> None:
        """Clear the session unconditionally."""
        ...
