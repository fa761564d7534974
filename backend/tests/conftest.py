"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest

from api.dependencies import reset_container
from modules.auth.models import UserSession
from shared.config import get_settings
from shared.local_store import LocalStore


FIXED_NOW = datetime(2025, 3, 14, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def now() -> datetime:
    """A fixed 'current time' for clock injection."""
    return FIXED_NOW


@pytest.fixture
def local_store(tmp_path) -> LocalStore:
    """A LocalStore backed by a temporary file."""
    return LocalStore(tmp_path / "state.json")


@pytest.fixture
def make_session(now) -> Callable[..., UserSession]:
    """Factory for UserSession objects valid for an hour by default."""

    def _make(**overrides) -> UserSession:
        values = {
            "uid": "u1",
            "email": "a@b.com",
            "id_token": "t1",
            "refresh_token": "r1",
            "expires_at": now + timedelta(hours=1),
        }
        values.update(overrides)
        return UserSession(**values)

    return _make


@pytest.fixture
def http_stub():
    """
    Factory for an httpx.AsyncClient answered by a handler.

    Returns (client, requests); every request the client sends is appended
    to `requests` before the handler answers it.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        return client, requests

    return _make


@pytest.fixture
def google_error() -> Callable[..., httpx.Response]:
    """Factory for Google-style REST error responses."""

    def _make(status_code: int, message: str, status: str = "") -> httpx.Response:
        return httpx.Response(
            status_code,
            json={"error": {"code": status_code, "message": message, "status": status}},
        )

    return _make
