"""
Centralized configuration for the Filter Fusion backend.

All settings are loaded from environment variables with sensible defaults.
Provider-specific settings are namespaced (e.g., FIREBASE_*, GOOGLE_*).
"""

from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Filter Fusion API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Dev server
    host: str = "0.0.0.0"
    port: int = 3001
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Firebase (identity, document store, object storage)
    firebase_api_key: str = ""
    firebase_project_id: str = ""
    firebase_storage_bucket: str = ""

    # Generative AI
    google_api_key: str = ""
    text_model: str = "gemini/gemini-2.5-flash"
    image_edit_model: str = "gemini-2.5-flash-image-preview"
    image_generation_model: str = "imagen-4.0-generate-001"

    # The one identity allowed to edit and delete filters
    admin_email: str = ""

    # Public URL of the frontend, used for share links
    app_url: str = "http://localhost:5173"

    # Local persistence (session, daily trend marker)
    state_dir: Path = Path.home() / ".filter-fusion"

    # Outbound HTTP
    http_timeout_seconds: float = 30.0
    filters_page_size: int = 100

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
