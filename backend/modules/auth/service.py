"""
Authentication client implementation.

Signs users up and in against the Identity Toolkit REST API and keeps the
resulting session fresh with the Secure Token API.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import httpx

from shared.exceptions import TransportError
from shared.http import error_payload, read_json

from .interfaces import IAuthClient, ISessionStore
from .models import AuthMode, Credentials, UserSession
from .exceptions import IdentityProviderError, MissingCredentialsError

logger = logging.getLogger(__name__)

IDENTITY_BASE_URL = "https://identitytoolkit.googleapis.com/v1/accounts"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"

# Tokens closer than this to expiry are refreshed before use
TOKEN_REFRESH_MARGIN = timedelta(minutes=5)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshFailedError(Exception):
    """Internal: the refresh exchange did not produce a usable session."""


class AuthClient(IAuthClient):
    """
    Implementation of the authentication client.

    The session lives in the injected ISessionStore; this class holds no
    session state of its own, so every component sharing the store sees the
    same principal.

    Sign-out wins over an in-flight refresh: a refresh whose session was
    cleared or replaced while it was running discards its result.
    """

    def __init__(
        self,
        api_key: str,
        session_store: ISessionStore,
        http: httpx.AsyncClient,
        clock: Callable[[], datetime] = utc_now,
        identity_url: str = IDENTITY_BASE_URL,
        token_url: str = SECURE_TOKEN_URL,
    ) -> None:
        self._api_key = api_key
        self._store = session_store
        self._http = http
        self._clock = clock
        self._identity_url = identity_url.rstrip("/")
        self._token_url = token_url
        self._refresh_lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Sign up / sign in / sign out
    # -------------------------------------------------------------------------

    async def sign_up(self, email: str, password: str) -> UserSession:
        """Create an account and persist the new session."""
        return await self._authenticate(AuthMode.SIGN_UP, email, password)

    async def sign_in(self, email: str, password: str) -> UserSession:
        """Verify credentials and persist the new session."""
        return await self._authenticate(AuthMode.SIGN_IN, email, password)

    def sign_out(self) -> None:
        self._store.clear()
        logger.info("User signed out")

    def current_session(self) -> Optional[UserSession]:
        return self._store.load()

    async def _authenticate(self, mode: AuthMode, email: str, password: str) -> UserSession:
        if not email or not email.strip() or not password:
            raise MissingCredentialsError()
        credentials = Credentials(email=email.strip(), password=password)

        try:
            response = await self._http.post(
                f"{self._identity_url}:{mode.value}",
                params={"key": self._api_key},
                json={**credentials.model_dump(), "returnSecureToken": True},
            )
        except httpx.HTTPError as e:
            raise TransportError("identity", str(e) or type(e).__name__)

        if not response.is_success:
            error = error_payload(response)
            raise IdentityProviderError(error.get("message"), status_code=response.status_code)

        data = read_json(response)
        try:
            session = UserSession(
                uid=data["localId"],
                email=data.get("email") or credentials.email,
                id_token=data["idToken"],
                refresh_token=data["refreshToken"],
                expires_at=self._expiry(data["expiresIn"]),
            )
        except (KeyError, TypeError, ValueError):
            raise IdentityProviderError(None, status_code=response.status_code)

        self._store.save(session)
        logger.info(f"User {session.uid} authenticated via {mode.value}")
        return session

    # -------------------------------------------------------------------------
    # Token lifecycle
    # -------------------------------------------------------------------------

    async def get_valid_token(self) -> Optional[str]:
        """
        Return a bearer token with at least five minutes left.

        Performs one refresh exchange when the stored token is too close to
        expiry. Any refresh failure, network errors included, signs the
        user out and returns None.
        """
        session = self._store.load()
        if session is None:
            return None
        if not session.expires_within(TOKEN_REFRESH_MARGIN, self._clock()):
            return session.id_token

        async with self._refresh_lock:
            # Another caller may have refreshed (or signed out) while we waited
            session = self._store.load()
            if session is None:
                return None
            if not session.expires_within(TOKEN_REFRESH_MARGIN, self._clock()):
                return session.id_token

            try:
                refreshed = await self._refresh(session)
            except RefreshFailedError as e:
                logger.warning(f"Token refresh failed, signing out: {e}")
                if self._is_still_current(session):
                    self._store.clear()
                return None

            if not self._is_still_current(session):
                logger.info("Session changed during token refresh; discarding refreshed token")
                return None

            self._store.save(refreshed)
            return refreshed.id_token

    async def _refresh(self, session: UserSession) -> UserSession:
        try:
            response = await self._http.post(
                self._token_url,
                params={"key": self._api_key},
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": session.refresh_token,
                },
            )
        except httpx.HTTPError as e:
            raise RefreshFailedError(str(e) or type(e).__name__)

        if not response.is_success:
            error = error_payload(response)
            raise RefreshFailedError(error.get("message") or f"HTTP {response.status_code}")

        data: dict[str, Any] = read_json(response)
        try:
            return session.model_copy(update={
                "id_token": data["id_token"],
                "refresh_token": data["refresh_token"],
                "expires_at": self._expiry(data["expires_in"]),
            })
        except (KeyError, TypeError, ValueError) as e:
            raise RefreshFailedError(f"malformed refresh response: {e}")

    def _is_still_current(self, session: UserSession) -> bool:
        stored = self._store.load()
        return stored is not None and stored.refresh_token == session.refresh_token

    def _expiry(self, expires_in: Any) -> datetime:
        return self._clock() + timedelta(seconds=int(expires_in))
