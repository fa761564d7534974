"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations from settings.

The CLI (main.py) uses the same container, so both entry points share one
wiring.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    import httpx

    from modules.auth.interfaces import IAuthClient, ISessionStore
    from modules.filters.controller import ViewStateController
    from modules.filters.interfaces import IFilterRepository
    from modules.generation.interfaces import IGenerationService
    from modules.sharing.service import ShareService
    from modules.trends.service import DailyTrendService
    from shared.firestore import FirestoreClient
    from shared.local_store import LocalStore


STATE_FILE_NAME = "state.json"


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._http: "httpx.AsyncClient | None" = None
        self._local_store: "LocalStore | None" = None
        self._session_store: "ISessionStore | None" = None
        self._auth: "IAuthClient | None" = None
        self._firestore: "FirestoreClient | None" = None
        self._filter_repository: "IFilterRepository | None" = None
        self._generation: "IGenerationService | None" = None
        self._trends: "DailyTrendService | None" = None
        self._controller: "ViewStateController | None" = None
        self._sharing: "ShareService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def http(self) -> "httpx.AsyncClient":
        """Shared HTTP client for every REST collaborator."""
        if self._http is None:
            from shared.http import create_http_client
            self._http = create_http_client(self.settings.http_timeout_seconds)
        return self._http

    @property
    def local_store(self) -> "LocalStore":
        if self._local_store is None:
            from shared.local_store import LocalStore
            self._local_store = LocalStore(self.settings.state_dir / STATE_FILE_NAME)
        return self._local_store

    @property
    def session_store(self) -> "ISessionStore":
        if self._session_store is None:
            from modules.auth.session_store import SessionStore
            self._session_store = SessionStore(self.local_store)
        return self._session_store

    @property
    def auth(self) -> "IAuthClient":
        """Get the auth client instance."""
        if self._auth is None:
            from modules.auth.service import AuthClient
            self._auth = AuthClient(
                api_key=self.settings.firebase_api_key,
                session_store=self.session_store,
                http=self.http,
            )
        return self._auth

    @property
    def firestore(self) -> "FirestoreClient":
        if self._firestore is None:
            from shared.firestore import FirestoreClient
            self._firestore = FirestoreClient(
                project_id=self.settings.firebase_project_id,
                api_key=self.settings.firebase_api_key,
                http=self.http,
            )
        return self._firestore

    @property
    def filter_repository(self) -> "IFilterRepository":
        """Get the filter repository instance."""
        if self._filter_repository is None:
            from modules.filters.repository import FilterRepository
            self._filter_repository = FilterRepository(
                self.firestore,
                page_size=self.settings.filters_page_size,
            )
        return self._filter_repository

    @property
    def generation(self) -> "IGenerationService":
        """Get the generation service instance."""
        if self._generation is None:
            from modules.generation.service import GenerationService
            from providers.factory import build_model_config, get_provider

            settings = self.settings
            text_config = build_model_config(
                settings.text_model,
                settings.google_api_key,
                timeout=settings.http_timeout_seconds,
            )
            edit_config = build_model_config(
                settings.image_edit_model,
                settings.google_api_key,
                timeout=settings.http_timeout_seconds,
            )
            generate_config = build_model_config(
                settings.image_generation_model,
                settings.google_api_key,
            )
            text_provider = get_provider(text_config.provider_type)
            image_provider = get_provider(edit_config.provider_type)

            self._generation = GenerationService(
                llm=text_provider.get_llm(text_config),
                image_client=image_provider.get_image_client(edit_config),
                image_edit_model=edit_config.model_id,
                image_generation_model=generate_config.model_id,
            )
        return self._generation

    @property
    def trends(self) -> "DailyTrendService":
        if self._trends is None:
            from modules.trends.service import DailyTrendService
            self._trends = DailyTrendService(
                generation=self.generation,
                repository=self.filter_repository,
                local_store=self.local_store,
            )
        return self._trends

    @property
    def controller(self) -> "ViewStateController":
        """Get the view state controller instance."""
        if self._controller is None:
            from modules.filters.controller import ViewStateController
            self._controller = ViewStateController(
                repository=self.filter_repository,
                auth=self.auth,
                admin_email=self.settings.admin_email,
                categorizer=self.generation,
                trend_generator=self.trends,
            )
        return self._controller

    @property
    def sharing(self) -> "ShareService":
        """Get the share service instance."""
        if self._sharing is None:
            from modules.sharing.repository import ShareRepository
            from modules.sharing.service import ShareService
            from modules.sharing.storage import StorageClient
            self._sharing = ShareService(
                storage=StorageClient(self.settings.firebase_storage_bucket, self.http),
                repository=ShareRepository(self.firestore),
                auth=self.auth,
                app_url=self.settings.app_url,
            )
        return self._sharing

    async def aclose(self) -> None:
        """Close network resources held by the container."""
        if self._controller is not None:
            self._controller.close()
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._http = None
        self._local_store = None
        self._session_store = None
        self._auth = None
        self._firestore = None
        self._filter_repository = None
        self._generation = None
        self._trends = None
        self._controller = None
        self._sharing = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_generation_service() -> "IGenerationService":
    """FastAPI dependency for generation service."""
    return get_container().generation

