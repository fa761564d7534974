"""
Filter repository for document store access.

Encapsulates all Firestore calls and document mapping for the `filters`
collection. Store failures are translated into filter exceptions here;
callers never see a raw DocumentStoreError.
"""

import logging
from typing import Any, Mapping, NoReturn, Optional, Union

from shared.exceptions import FilterFusionError
from shared.firestore import DocumentStoreError, FirestoreClient, StoreErrorKind
from shared.repository import BaseRepository

from .exceptions import (
    FilterNotFoundError,
    FilterPermissionError,
    FilterStoreError,
    FilterValidationError,
    MissingIndexError,
)
from .interfaces import IFilterRepository
from .models import (
    Filter,
    FilterCategory,
    FilterCreate,
    FilterType,
    FilterUpdate,
)

logger = logging.getLogger(__name__)


class FilterRepository(BaseRepository[Filter], IFilterRepository):
    """
    Repository for filter data access.

    Note: This repository does NOT perform role checks. The controller is
    responsible for verifying the caller may mutate the catalog; the store's
    security rules are the final word.
    """

    collection = "filters"

    def __init__(self, db: FirestoreClient, page_size: int = 100) -> None:
        super().__init__(db)
        self._page_size = page_size

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_filters(self) -> list[Filter]:
        """
        Get every filter, newest first.

        Follows page tokens until the store reports no further page and
        concatenates pages in order.
        """
        try:
            documents = await self._db.list_all_documents(
                self.collection,
                order_by="createdAt desc",
                page_size=self._page_size,
            )
        except DocumentStoreError as e:
            if e.kind == StoreErrorKind.MISSING_INDEX:
                logger.error(f"Filter listing needs a composite index: {e.message}")
                raise MissingIndexError(e.message)
            raise FilterStoreError("load filters from the database", e.message)

        filters = [self._map_to_filter(document) for document in documents]
        logger.debug(f"Loaded {len(filters)} filters")
        return filters

    async def get(self, filter_id: str) -> Optional[Filter]:
        try:
            document = await self._db.get_document(self.collection, filter_id)
        except DocumentStoreError as e:
            if e.kind == StoreErrorKind.NOT_FOUND:
                return None
            raise FilterStoreError("load the filter", e.message)
        return self._map_to_filter(document)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create(
        self,
        data: Union[FilterCreate, Mapping[str, Any]],
        auth_token: Optional[str] = None,
    ) -> Filter:
        """
        Create a filter.

        The record is written in one commit with accessCount 0 and a
        server-assigned createdAt, so it is never visible half-initialised.

        Args:
            data: Filter fields; name, description, prompt and
                  previewImageUrl are required.
            auth_token: Optional bearer token for the store's rules.

        Returns:
            The created Filter, including its id and createdAt.
        """
        payload = data if isinstance(data, FilterCreate) else FilterCreate.model_validate(dict(data))
        missing = payload.missing_fields()
        if missing:
            raise FilterValidationError.missing(missing)

        fields: dict[str, Any] = {
            "name": payload.name.strip(),
            "description": payload.description.strip(),
            "prompt": payload.prompt.strip(),
            "previewImageUrl": payload.preview_image_url,
            "category": (payload.category or FilterCategory.USEFUL).value,
            "type": payload.type.value,
            "accessCount": 0,
        }
        if payload.user_id:
            fields["userId"] = payload.user_id
        if payload.username:
            fields["username"] = payload.username

        try:
            document = await self._db.create_document(
                self.collection,
                fields,
                server_timestamps=["createdAt"],
                token=auth_token,
            )
        except DocumentStoreError as e:
            self._raise_write_error(e, "save the filter")

        created = self._map_to_filter(document)
        logger.info(f"Created filter {created.id} ({created.name})")
        return created

    async def update(
        self,
        filter_id: str,
        fields: Union[FilterUpdate, Mapping[str, Any], Filter],
        auth_token: Optional[str],
    ) -> Filter:
        """
        Update the supplied fields of a filter.

        Only the fields present on the input are sent, with a matching
        field mask; identity and audit fields are never transmitted.

        Returns:
            The filter as stored after the update.
        """
        update = FilterUpdate.from_fields(fields)
        mask = update.field_mask()
        if not mask:
            raise FilterValidationError("No editable filter fields were supplied.")
        blank = [
            path for path, value in update.to_store_fields().items()
            if isinstance(value, str) and not value.strip()
        ]
        if blank:
            raise FilterValidationError.missing(blank)
        if not auth_token:
            raise FilterPermissionError(filter_id)

        try:
            document = await self._db.patch_document(
                self.collection,
                filter_id,
                update.to_store_fields(),
                field_mask=mask,
                token=auth_token,
            )
        except DocumentStoreError as e:
            self._raise_write_error(e, "update the filter", filter_id)

        logger.info(f"Updated filter {filter_id}: {', '.join(mask)}")
        return self._map_to_filter(document)

    async def delete(self, filter_id: str, auth_token: Optional[str]) -> None:
        if not auth_token:
            raise FilterPermissionError(filter_id)

        try:
            await self._db.delete_document(self.collection, filter_id, token=auth_token)
        except DocumentStoreError as e:
            self._raise_write_error(e, "delete the filter", filter_id)

        logger.info(f"Deleted filter {filter_id}")

    async def increment_access_count(self, filter_id: str) -> None:
        """
        Atomically add one to a filter's accessCount.

        Best effort: any failure is logged and swallowed so that opening a
        filter never depends on the counter.
        """
        try:
            await self._db.increment(self.collection, filter_id, "accessCount", 1)
        except FilterFusionError as e:
            logger.warning(f"Could not increment access count for filter {filter_id}: {e.message}")

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _raise_write_error(
        error: DocumentStoreError,
        operation: str,
        filter_id: Optional[str] = None,
    ) -> NoReturn:
        if error.kind == StoreErrorKind.PERMISSION_DENIED:
            raise FilterPermissionError(filter_id)
        if error.kind == StoreErrorKind.NOT_FOUND and filter_id:
            raise FilterNotFoundError(filter_id)
        raise FilterStoreError(operation, error.message)

    def _map_to_filter(self, document: dict[str, Any]) -> Filter:
        doc_id, data = self._unpack(document)
        return Filter(
            id=doc_id,
            name=data.get("name") or "",
            description=data.get("description") or "",
            prompt=data.get("prompt") or "",
            preview_image_url=data.get("previewImageUrl") or "",
            category=FilterCategory.parse(data.get("category")),
            type=FilterType.parse(data.get("type")),
            user_id=data.get("userId"),
            username=data.get("username"),
            access_count=max(int(data.get("accessCount") or 0), 0),
            created_at=data.get("createdAt"),
        )
