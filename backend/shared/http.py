"""
Outbound HTTP helpers.

All REST collaborators (identity, document store, object storage) share one
httpx.AsyncClient created here, so every call carries the configured timeout.
"""

from typing import Any, Optional

import httpx

from .config import get_settings


def create_http_client(timeout: Optional[float] = None, **kwargs: Any) -> httpx.AsyncClient:
    """
    Create the shared async HTTP client.

    Args:
        timeout: Per-request timeout in seconds. Defaults to the
                 HTTP_TIMEOUT_SECONDS setting.
        **kwargs: Passed through to httpx.AsyncClient (tests pass a transport).
    """
    if timeout is None:
        timeout = get_settings().http_timeout_seconds
    return httpx.AsyncClient(timeout=timeout, **kwargs)


def read_json(response: httpx.Response) -> dict[str, Any]:
    """Decode a JSON object body, returning {} for empty or non-JSON bodies."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def error_payload(response: httpx.Response) -> dict[str, Any]:
    """
    Extract the Google-style error object from a failed response.

    Google REST APIs answer errors as {"error": {"code", "message", "status"}}.
    Returns {} when the body has no such object.
    """
    error = read_json(response).get("error")
    if isinstance(error, dict):
        return error
    if isinstance(error, str):
        return {"message": error}
    return {}
