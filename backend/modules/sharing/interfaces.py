"""
Sharing module interfaces.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import Share, ShareFile


@runtime_checkable
class NativeShare(Protocol):
    """
    A platform share capability (share sheet, messaging integration...).

    share() raises ShareCancelledError when the user backs out.
    """

    def can_share(self, file: ShareFile) -> bool:
        ...

    async def share(self, file: ShareFile, title: str, text: str) -> None:
        ...


@runtime_checkable
class IStorageClient(Protocol):
    """Object storage for uploaded images."""

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        token: Optional[str] = None,
    ) -> str:
        """Upload bytes to path and return a public download URL."""
        ...


@runtime_checkable
class IShareRepository(Protocol):
    """Persistence of share metadata."""

    async def create(self, data: dict[str, Any], auth_token: Optional[str] = None) -> Share:
        ...

    async def get(self, share_id: str) -> Optional[Share]:
        ...
