"""Tests for the authentication client and token lifecycle."""

import asyncio
import json
from datetime import timedelta
from urllib.parse import parse_qs

import httpx
import pytest

from modules.auth import (
    AuthClient,
    IdentityProviderError,
    MissingCredentialsError,
    SessionStore,
    UserSession,
)
from shared.exceptions import AuthenticationError, TransportError, ValidationError


def identity_success(uid: str = "u1", token: str = "t1", email: str = "a@b.com") -> httpx.Response:
    return httpx.Response(200, json={
        "localId": uid,
        "email": email,
        "idToken": token,
        "refreshToken": "r1",
        "expiresIn": "3600",
    })


def refresh_success(token: str = "t2", refresh_token: str = "r2") -> httpx.Response:
    return httpx.Response(200, json={
        "id_token": token,
        "refresh_token": refresh_token,
        "expires_in": "3600",
        "user_id": "u1",
    })


@pytest.fixture
def session_store(local_store):
    return SessionStore(local_store)


@pytest.fixture
def make_auth(http_stub, session_store, now):
    """Build an AuthClient over a stubbed transport. Returns (client, requests)."""

    def _make(handler):
        http, requests = http_stub(handler)
        client = AuthClient(
            api_key="web-key",
            session_store=session_store,
            http=http,
            clock=lambda: now,
        )
        return client, requests

    return _make


class TestSignInAndSignUp:
    @pytest.mark.asyncio
    async def test_sign_in_persists_session(self, make_auth, session_store, local_store, now):
        """Signing in stores a session that reloads as an equal object."""
        auth, requests = make_auth(lambda request: identity_success())

        session = await auth.sign_in("a@b.com", "secret1")

        assert session.uid == "u1"
        assert session.id_token == "t1"
        assert session.expires_at == now + timedelta(seconds=3600)
        assert session_store.load() == session
        assert SessionStore(local_store).load() == session

        request = requests[0]
        assert request.url.path.endswith("accounts:signInWithPassword")
        assert request.url.params["key"] == "web-key"
        assert json.loads(request.content) == {
            "email": "a@b.com",
            "password": "secret1",
            "returnSecureToken": True,
        }

    @pytest.mark.asyncio
    async def test_sign_up_then_token_available(self, make_auth):
        """A fresh sign-up yields a usable bearer token without refreshing."""
        auth, requests = make_auth(lambda request: identity_success(uid="new", token="fresh"))

        session = await auth.sign_up("new@b.com", "secret1")
        token = await auth.get_valid_token()

        assert session.uid == "new"
        assert token == "fresh"
        assert len(requests) == 1
        assert requests[0].url.path.endswith("accounts:signUp")

    @pytest.mark.asyncio
    async def test_email_is_trimmed(self, make_auth):
        auth, requests = make_auth(lambda request: identity_success())
        await auth.sign_in("  a@b.com ", "secret1")
        assert json.loads(requests[0].content)["email"] == "a@b.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [("", "secret1"), ("   ", "secret1"), ("a@b.com", "")])
    async def test_missing_credentials_make_no_request(self, make_auth, email, password):
        auth, requests = make_auth(lambda request: identity_success())

        with pytest.raises(MissingCredentialsError) as exc_info:
            await auth.sign_in(email, password)

        assert isinstance(exc_info.value, ValidationError)
        assert requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw,expected_fragment",
        [
            ("EMAIL_EXISTS", "already in use"),
            ("INVALID_LOGIN_CREDENTIALS", "Invalid email or password"),
            ("WEAK_PASSWORD : Password should be at least 6 characters", "at least 6 characters"),
            ("TOO_MANY_ATTEMPTS_TRY_LATER", "TOO_MANY_ATTEMPTS_TRY_LATER"),
        ],
    )
    async def test_provider_rejection_is_translated(
        self, make_auth, session_store, google_error, raw, expected_fragment
    ):
        auth, _ = make_auth(lambda request: google_error(400, raw, "INVALID_ARGUMENT"))

        with pytest.raises(IdentityProviderError) as exc_info:
            await auth.sign_up("a@b.com", "secret1")

        assert isinstance(exc_info.value, AuthenticationError)
        assert expected_fragment in exc_info.value.message
        assert session_store.load() is None

    @pytest.mark.asyncio
    async def test_network_failure_is_transport_error(self, make_auth):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        auth, _ = make_auth(handler)
        with pytest.raises(TransportError):
            await auth.sign_in("a@b.com", "secret1")

    @pytest.mark.asyncio
    async def test_malformed_success_body(self, make_auth, session_store):
        auth, _ = make_auth(lambda request: httpx.Response(200, json={"localId": "u1"}))
        with pytest.raises(IdentityProviderError):
            await auth.sign_in("a@b.com", "secret1")
        assert session_store.load() is None

    def test_sign_out_clears_session(self, make_auth, session_store, make_session):
        auth, _ = make_auth(lambda request: identity_success())
        session_store.save(make_session())

        auth.sign_out()
        auth.sign_out()

        assert auth.current_session() is None


class TestGetValidToken:
    @pytest.mark.asyncio
    async def test_signed_out_returns_none(self, make_auth):
        auth, requests = make_auth(lambda request: refresh_success())
        assert await auth.get_valid_token() is None
        assert requests == []

    @pytest.mark.asyncio
    async def test_fresh_token_returned_without_refresh(self, make_auth, session_store, make_session, now):
        session_store.save(make_session(expires_at=now + timedelta(minutes=30)))
        auth, requests = make_auth(lambda request: refresh_success())

        assert await auth.get_valid_token() == "t1"
        assert requests == []

    @pytest.mark.asyncio
    async def test_near_expiry_refreshes_exactly_once(self, make_auth, session_store, make_session, now):
        """A token expiring in under five minutes is refreshed once and persisted."""
        session_store.save(make_session(expires_at=now + timedelta(minutes=2)))
        auth, requests = make_auth(lambda request: refresh_success())

        token = await auth.get_valid_token()

        assert token == "t2"
        assert len(requests) == 1
        form = parse_qs(requests[0].content.decode())
        assert form == {"grant_type": ["refresh_token"], "refresh_token": ["r1"]}

        stored = session_store.load()
        assert stored.id_token == "t2"
        assert stored.refresh_token == "r2"
        assert stored.uid == "u1"
        assert stored.email == "a@b.com"
        assert stored.expires_at == now + timedelta(seconds=3600)

        # Now fresh: no further refresh
        assert await auth.get_valid_token() == "t2"
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self, make_auth, session_store, make_session, now):
        session_store.save(make_session(expires_at=now - timedelta(minutes=1)))
        auth, requests = make_auth(lambda request: refresh_success())

        tokens = await asyncio.gather(auth.get_valid_token(), auth.get_valid_token())

        assert tokens == ["t2", "t2"]
        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_refresh_rejection_signs_out(self, make_auth, session_store, make_session, now, google_error):
        session_store.save(make_session(expires_at=now + timedelta(minutes=1)))
        auth, _ = make_auth(lambda request: google_error(400, "TOKEN_EXPIRED", "INVALID_ARGUMENT"))

        assert await auth.get_valid_token() is None
        assert session_store.load() is None

    @pytest.mark.asyncio
    async def test_refresh_network_failure_signs_out(self, make_auth, session_store, make_session, now):
        session_store.save(make_session(expires_at=now + timedelta(minutes=1)))

        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        auth, _ = make_auth(handler)

        assert await auth.get_valid_token() is None
        assert session_store.load() is None

    @pytest.mark.asyncio
    async def test_sign_out_during_refresh_wins(self, make_auth, session_store, make_session, now):
        """A refresh that completes after sign-out must not resurrect the session."""
        session_store.save(make_session(expires_at=now + timedelta(minutes=1)))

        def handler(request):
            session_store.clear()
            return refresh_success()

        auth, _ = make_auth(handler)

        assert await auth.get_valid_token() is None
        assert session_store.load() is None

    @pytest.mark.asyncio
    async def test_new_sign_in_during_refresh_is_kept(self, make_auth, session_store, make_session, now):
        session_store.save(make_session(expires_at=now + timedelta(minutes=1)))
        replacement = UserSession(
            uid="u9",
            email="other@b.com",
            id_token="t9",
            refresh_token="r9",
            expires_at=now + timedelta(hours=1),
        )

        def handler(request):
            session_store.save(replacement)
            return refresh_success()

        auth, _ = make_auth(handler)

        assert await auth.get_valid_token() is None
        assert session_store.load() == replacement
