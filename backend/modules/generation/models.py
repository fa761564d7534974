"""
Generation module data models.

Request and response bodies of the generation routes, and the structured
shapes the text model is asked to produce.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


# -----------------------------------------------------------------------------
# Structured model output
# -----------------------------------------------------------------------------


class FilterConcept(BaseModel):
    """Filter fields proposed by the text model."""

    name: str = Field(..., min_length=1, description='A short, catchy name for the filter (e.g., "Cosmic Dream").')
    description: str = Field(..., min_length=1, description="A one-sentence, exciting description of what the filter does.")
    prompt: str = Field(..., min_length=1, description="A detailed, artistic command for an AI image model that applies the filter effect.")


class CategoryResult(BaseModel):
    """The categorizer's verdict."""

    category: Literal["Useful", "Fun"]


class GeneratedFilter(_CamelModel):
    """A complete AI-generated filter concept with its preview image."""

    name: str
    description: str
    prompt: str
    preview_image_url: str


# -----------------------------------------------------------------------------
# Route bodies
# -----------------------------------------------------------------------------


class ApplyFilterRequest(_CamelModel):
    prompt: str = ""
    image: Optional[str] = None
    images: Optional[list[str]] = None

    def all_images(self) -> list[str]:
        collected = list(self.images or [])
        if self.image:
            collected.insert(0, self.image)
        return collected


class GeneratePreviewRequest(_CamelModel):
    description: str = ""


class ImprovePromptRequest(_CamelModel):
    current_prompt: str = ""


class GenerateFullFilterRequest(_CamelModel):
    theme: str = ""


class CategorizeFilterRequest(_CamelModel):
    name: str = ""
    description: str = ""
    prompt: str = ""


class ImageResponse(_CamelModel):
    image_url: str


class ImprovedPromptResponse(_CamelModel):
    improved_prompt: str


class RandomPromptResponse(_CamelModel):
    prompt: str


class CategoryResponse(_CamelModel):
    category: str
