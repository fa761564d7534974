"""
Sharing module.

Public API:
- ShareService: Native share or upload-and-link flow
- StorageClient: Firebase Storage uploads
- ShareRepository: Share metadata persistence
- NativeShare: Protocol for platform share capabilities
- Models and exceptions
"""

from .interfaces import IShareRepository, IStorageClient, NativeShare
from .service import ShareService
from .storage import StorageClient
from .repository import ShareRepository
from .models import Share, ShareFile, ShareMethod, ShareResult
from .exceptions import (
    ShareCancelledError,
    ShareError,
    ShareNotFoundError,
    ShareSignInRequiredError,
    StorageUploadError,
)

__all__ = [
    # Interfaces
    "IShareRepository",
    "IStorageClient",
    "NativeShare",
    # Implementations
    "ShareService",
    "StorageClient",
    "ShareRepository",
    # Models
    "Share",
    "ShareFile",
    "ShareMethod",
    "ShareResult",
    # Exceptions
    "ShareCancelledError",
    "ShareError",
    "ShareNotFoundError",
    "ShareSignInRequiredError",
    "StorageUploadError",
]
