"""
Filters module interfaces.

The controller depends on these protocols rather than on the repository,
the generation service or the trend job directly, which keeps the module
free of import cycles and lets tests hand in mocks.
"""

from typing import Any, Mapping, Optional, Protocol, Union, runtime_checkable

from .models import Filter, FilterCategory, FilterCreate, FilterUpdate


@runtime_checkable
class IFilterRepository(Protocol):
    """Persistence of the shared filter catalog."""

    async def list_filters(self) -> list[Filter]:
        """
        Return every filter, newest first, across all pages.

        Raises:
            MissingIndexError: If the store needs a composite index
            FilterStoreError: For any other store failure
        """
        ...

    async def get(self, filter_id: str) -> Optional[Filter]:
        """Return one filter, or None if it does not exist."""
        ...

    async def create(
        self,
        data: Union[FilterCreate, Mapping[str, Any]],
        auth_token: Optional[str] = None,
    ) -> Filter:
        """
        Persist a new filter with accessCount 0 and a server createdAt.

        Raises:
            FilterValidationError: If a required field is blank (no network call)
        """
        ...

    async def update(
        self,
        filter_id: str,
        fields: Union[FilterUpdate, Mapping[str, Any], Filter],
        auth_token: Optional[str],
    ) -> Filter:
        """
        Apply a field-masked partial update and return the stored record.

        Raises:
            FilterPermissionError: Missing token, or the store refused
            FilterNotFoundError: If the filter does not exist
        """
        ...

    async def delete(self, filter_id: str, auth_token: Optional[str]) -> None:
        """Delete a filter. Same error mapping as update."""
        ...

    async def increment_access_count(self, filter_id: str) -> None:
        """Add one to accessCount server side. Never raises."""
        ...


@runtime_checkable
class IFilterCategorizer(Protocol):
    """Chooses a category for a user-created filter."""

    async def categorize_filter(
        self, name: str, description: str, prompt: str
    ) -> FilterCategory:
        ...


@runtime_checkable
class ITrendGenerator(Protocol):
    """The once-a-day trending filter job."""

    async def check_and_generate_daily_trend(self) -> Optional[Filter]:
        ...
