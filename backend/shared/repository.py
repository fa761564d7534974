"""
Base repository class for document store access.

Provides a common abstraction layer for all repositories, encapsulating
Firestore client access and providing shared utilities for data operations.
"""

from typing import Any, Generic, TypeVar

from .firestore import FirestoreClient, decode_fields, document_id


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for document operations:
    - Firestore client access via self._db
    - The collection name via self.collection
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle document-to-Pydantic model mapping internally.

    Example:
        class ShareRepository(BaseRepository[Share]):
            collection = "shares"

            async def get(self, share_id: str) -> Share:
                document = await self._db.get_document(self.collection, share_id)
                return self._map_to_share(document)
    """

    collection: str = ""

    def __init__(self, db: FirestoreClient) -> None:
        """
        Initialize the repository with a Firestore client.

        Args:
            db: FirestoreClient instance for document operations.
        """
        self._db = db

    @staticmethod
    def _unpack(document: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        """Split a REST document into (id, decoded fields)."""
        return document_id(document), decode_fields(document.get("fields", {}))
