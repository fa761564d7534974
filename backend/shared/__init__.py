"""
Shared infrastructure for the Filter Fusion backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- exceptions: Base exception classes
- firestore: Document store REST client
- http: Shared HTTP client factory
- local_store: Local key/value persistence
- logging_config: Root logger setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .exceptions import (
    FilterFusionError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    PermissionDeniedError,
    ProviderError,
    ExternalServiceError,
    TransportError,
    PERMISSION_DENIED_MESSAGE,
)
from .firestore import FirestoreClient, DocumentStoreError, StoreErrorKind
from .http import create_http_client
from .local_store import LocalStore
from .logging_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "FilterFusionError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "PermissionDeniedError",
    "ProviderError",
    "ExternalServiceError",
    "TransportError",
    "PERMISSION_DENIED_MESSAGE",
    "FirestoreClient",
    "DocumentStoreError",
    "StoreErrorKind",
    "create_http_client",
    "LocalStore",
    "configure_logging",
]
