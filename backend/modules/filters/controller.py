"""
View state controller.

Owns the in-memory filter catalog and the current view. Remote calls go
through the injected repository, auth client, categorizer and trend job;
every change to the catalog is expressed as an action for reduce_filters().
"""

import asyncio
import logging
from typing import Any, Mapping, Optional, Union

from modules.auth.interfaces import IAuthClient
from modules.auth.models import UserSession
from shared.exceptions import FilterFusionError, PermissionDeniedError

from .catalog import (
    FilterAction,
    FilterCatalogState,
    FilterCreated,
    FilterDeleted,
    FilterOpened,
    FilterUpdated,
    FiltersLoadFailed,
    FiltersLoaded,
    reduce_filters,
)
from .defaults import DEFAULT_FILTERS
from .exceptions import FilterNotFoundError, FilterValidationError
from .interfaces import IFilterCategorizer, IFilterRepository, ITrendGenerator
from .models import Filter, FilterCategory, FilterCreate, FilterUpdate, ViewState

logger = logging.getLogger(__name__)


class ViewStateController:
    """
    Client-side state for the marketplace.

    Privileged operations (update, delete) require the signed-in email to
    match the configured admin email and fail locally, before any network
    call, when it does not.
    """

    def __init__(
        self,
        repository: IFilterRepository,
        auth: IAuthClient,
        admin_email: str = "",
        categorizer: Optional[IFilterCategorizer] = None,
        trend_generator: Optional[ITrendGenerator] = None,
        fallback_filters: tuple[Filter, ...] = DEFAULT_FILTERS,
    ) -> None:
        self._repository = repository
        self._auth = auth
        self._admin_email = admin_email.strip().lower()
        self._categorizer = categorizer
        self._trend_generator = trend_generator
        self._fallback_filters = fallback_filters

        self._state = FilterCatalogState()
        self._view = ViewState.marketplace()
        self._load_generation = 0
        self._closed = False
        self._background: set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> FilterCatalogState:
        return self._state

    @property
    def filters(self) -> tuple[Filter, ...]:
        return self._state.filters

    @property
    def view(self) -> ViewState:
        return self._view

    def dispatch(self, action: FilterAction) -> FilterCatalogState:
        self._state = reduce_filters(self._state, action)
        return self._state

    def navigate(self, view: ViewState) -> ViewState:
        self._view = view
        return view

    def is_admin(self, session: Optional[UserSession] = None) -> bool:
        session = session or self._auth.current_session()
        if session is None or not self._admin_email:
            return False
        return session.email.strip().lower() == self._admin_email

    def close(self) -> None:
        """Stop applying results of requests still in flight."""
        self._closed = True

    async def wait_for_background(self) -> None:
        """Wait for scheduled background work (access count increments)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self) -> tuple[Filter, ...]:
        """
        Load the catalog from the store.

        Only the most recent load applies its result. When it fails, the
        built-in filters are shown and the error is recorded on the state.
        """
        self._load_generation += 1
        generation = self._load_generation

        try:
            filters = await self._repository.list_filters()
        except FilterFusionError as e:
            if self._is_stale(generation):
                return self.filters
            logger.error(f"Failed to load filters, showing defaults: {e.message}")
            self.dispatch(FiltersLoadFailed(message=e.message, fallback=self._fallback_filters))
            return self.filters

        if self._is_stale(generation):
            logger.debug("Discarding stale filter load result")
            return self.filters

        self.dispatch(FiltersLoaded(filters=tuple(filters)))
        return self.filters

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._load_generation

    # -------------------------------------------------------------------------
    # Catalog operations
    # -------------------------------------------------------------------------

    async def create_filter(self, data: Union[FilterCreate, Mapping[str, Any]]) -> Filter:
        """
        Create a filter as the signed-in user.

        When no category is given the categorizer picks one; if it fails,
        the filter is filed under Useful.
        """
        payload = data if isinstance(data, FilterCreate) else FilterCreate.model_validate(dict(data))
        missing = payload.missing_fields()
        if missing:
            raise FilterValidationError.missing(missing)

        session = self._auth.current_session()
        if session is None:
            raise PermissionDeniedError()
        token = await self._auth.get_valid_token()
        if token is None:
            raise PermissionDeniedError()

        category = payload.category or await self._categorize(payload)
        payload = payload.model_copy(update={
            "category": category,
            "user_id": session.uid,
            "username": session.email,
        })

        created = await self._repository.create(payload, auth_token=token)
        self.dispatch(FilterCreated(filter=created))
        self.navigate(ViewState.marketplace())
        return created

    async def _categorize(self, payload: FilterCreate) -> FilterCategory:
        if self._categorizer is None:
            return FilterCategory.USEFUL
        try:
            return await self._categorizer.categorize_filter(
                payload.name, payload.description, payload.prompt
            )
        except FilterFusionError as e:
            logger.warning(f"Categorization failed, defaulting to Useful: {e.message}")
            return FilterCategory.USEFUL

    async def open_filter(self, filter: Union[Filter, str]) -> Filter:
        """
        Open a filter for applying.

        The local counter moves at once; the remote increment runs in the
        background and its outcome never reaches the caller.
        """
        filter_id = filter if isinstance(filter, str) else filter.id
        self.dispatch(FilterOpened(filter_id=filter_id))

        opened = next((f for f in self.filters if f.id == filter_id), None)
        if opened is None:
            if isinstance(filter, str):
                raise FilterNotFoundError(filter_id)
            opened = filter.model_copy(update={"access_count": filter.access_count + 1})

        self.navigate(ViewState.apply(opened))

        task = asyncio.create_task(self._repository.increment_access_count(filter_id))
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return opened

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Background access count update failed: {task.exception()}")

    async def update_filter(
        self,
        filter_id: str,
        fields: Union[FilterUpdate, Mapping[str, Any], Filter],
    ) -> Filter:
        """Admin only: update a filter and replace it in the catalog."""
        token = await self._require_admin_token()
        updated = await self._repository.update(filter_id, fields, token)
        self.dispatch(FilterUpdated(filter=updated))
        return updated

    async def delete_filter(self, filter_id: str) -> None:
        """Admin only: delete a filter and drop it from the catalog."""
        token = await self._require_admin_token()
        await self._repository.delete(filter_id, token)
        self.dispatch(FilterDeleted(filter_id=filter_id))

    async def _require_admin_token(self) -> str:
        if not self.is_admin():
            raise PermissionDeniedError()
        token = await self._auth.get_valid_token()
        if token is None:
            raise PermissionDeniedError()
        return token

    async def run_daily_trend(self) -> Optional[Filter]:
        """Generate today's trending filter if due. Failures are logged only."""
        if self._trend_generator is None:
            return None
        try:
            created = await self._trend_generator.check_and_generate_daily_trend()
        except FilterFusionError as e:
            logger.warning(f"Daily trend generation failed: {e.message}")
            return None
        if created is not None:
            self.dispatch(FilterCreated(filter=created))
        return created

    # -------------------------------------------------------------------------
    # Session helpers
    # -------------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> UserSession:
        session = await self._auth.sign_in(email, password)
        self.navigate(ViewState.marketplace())
        return session

    async def sign_up(self, email: str, password: str) -> UserSession:
        session = await self._auth.sign_up(email, password)
        self.navigate(ViewState.marketplace())
        return session

    def sign_out(self) -> None:
        self._auth.sign_out()
        self.navigate(ViewState.marketplace())
