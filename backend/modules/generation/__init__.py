"""
Generation module.

Generative AI operations: applying filters to photos, generating preview
images, and text helpers for filter creation (prompt improvement, random
prompts, full filter concepts, categorization, trending filters).

Public API:
- IGenerationService: Interface for generative operations
- GenerationService: Gemini implementation
- Models: GeneratedFilter, FilterConcept
- Image helpers: parse_data_url, to_data_url
- Generation exceptions
"""

from .interfaces import IGenerationService
from .service import GenerationService
from .models import FilterConcept, GeneratedFilter
from .images import ImageData, parse_data_url, parse_image_input, to_data_url
from .exceptions import (
    GenerationValidationError,
    InvalidImageDataError,
    MalformedResponseError,
    NoImageReturnedError,
    SafetyBlockedError,
)

__all__ = [
    # Interfaces
    "IGenerationService",
    # Implementation
    "GenerationService",
    # Models
    "FilterConcept",
    "GeneratedFilter",
    # Image helpers
    "ImageData",
    "parse_data_url",
    "parse_image_input",
    "to_data_url",
    # Exceptions
    "GenerationValidationError",
    "InvalidImageDataError",
    "MalformedResponseError",
    "NoImageReturnedError",
    "SafetyBlockedError",
]
