"""
Filter Fusion API package.

Provides the FastAPI application serving the generative AI endpoints.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
