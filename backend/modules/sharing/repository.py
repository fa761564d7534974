"""
Share repository for document store access.

Encapsulates the `shares` collection.
"""

from typing import Any, Optional

from shared.exceptions import PermissionDeniedError
from shared.firestore import DocumentStoreError, StoreErrorKind
from shared.repository import BaseRepository

from .exceptions import ShareError
from .interfaces import IShareRepository
from .models import Share


class ShareRepository(BaseRepository[Share], IShareRepository):
    """Repository for share metadata. Shares are created once and only read afterwards."""

    collection = "shares"

    async def create(self, data: dict[str, Any], auth_token: Optional[str] = None) -> Share:
        """
        Save share metadata.

        Args:
            data: imageUrl, filterId, filterName and optional userId/username.
            auth_token: Bearer token for the store's rules.

        Returns:
            The saved Share with its id and server createdAt.
        """
        try:
            document = await self._db.create_document(
                self.collection,
                data,
                server_timestamps=["createdAt"],
                token=auth_token,
            )
        except DocumentStoreError as e:
            if e.kind == StoreErrorKind.PERMISSION_DENIED:
                raise PermissionDeniedError()
            raise ShareError(e.message)
        return self._map_to_share(document)

    async def get(self, share_id: str) -> Optional[Share]:
        try:
            document = await self._db.get_document(self.collection, share_id)
        except DocumentStoreError as e:
            if e.kind == StoreErrorKind.NOT_FOUND:
                return None
            raise
        return self._map_to_share(document)

    def _map_to_share(self, document: dict[str, Any]) -> Share:
        doc_id, data = self._unpack(document)
        return Share(
            id=doc_id,
            image_url=data.get("imageUrl") or "",
            filter_id=data.get("filterId") or "",
            filter_name=data.get("filterName") or "",
            user_id=data.get("userId"),
            username=data.get("username"),
            created_at=data.get("createdAt"),
        )
