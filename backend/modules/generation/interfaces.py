"""
Generation module interfaces.
"""

from typing import Protocol, Sequence, runtime_checkable

from modules.filters.models import FilterCategory

from .models import GeneratedFilter


@runtime_checkable
class IGenerationService(Protocol):
    """
    Interface for the generative AI operations.

    Every operation validates its inputs before calling the provider and
    raises:
        ValidationError: Blank input or undecodable image (no provider call)
        SafetyBlockedError: The provider refused on safety grounds
        MalformedResponseError / NoImageReturnedError: Unusable output
        TransportError: The provider could not be reached
    """

    async def apply_filter(self, images: Sequence[str], prompt: str) -> str:
        """Apply a prompt to one or more images; returns an image data URL."""
        ...

    async def generate_image_from_prompt(self, prompt: str) -> str:
        """Generate one square JPEG from a text prompt; returns a data URL."""
        ...

    async def generate_preview(self, description: str) -> str:
        """Generate a preview image for a style description."""
        ...

    async def improve_prompt(self, current_prompt: str) -> str:
        ...

    async def generate_random_prompt(self) -> str:
        ...

    async def generate_full_filter(self, theme: str) -> GeneratedFilter:
        ...

    async def categorize_filter(self, name: str, description: str, prompt: str) -> FilterCategory:
        """Return FilterCategory.USEFUL or FilterCategory.FUN."""
        ...

    async def generate_trending_filter(self) -> GeneratedFilter:
        ...
