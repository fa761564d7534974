"""
Generation service implementation.

Text and JSON generation go through a langchain chat model; image editing
and text-to-image go through the google-genai client. Both paths share the
same error policy: validation before any call, safety refusals and unusable
output as ProviderError subclasses, network failures as TransportError.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

import httpx
from google.genai import errors as genai_errors
from google.genai import types
from langchain_core.exceptions import OutputParserException
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import JsonOutputParser
from langchain_google_genai.chat_models import ChatGoogleGenerativeAIError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from modules.filters.models import FilterCategory
from shared.exceptions import ProviderError, TransportError

from . import prompts
from .exceptions import (
    PROVIDER,
    GenerationValidationError,
    MalformedResponseError,
    NoImageReturnedError,
    SafetyBlockedError,
)
from .images import parse_image_input, to_data_url
from .interfaces import IGenerationService
from .models import CategoryResult, FilterConcept, GeneratedFilter

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")

SAFETY_FINISH_REASONS = frozenset({
    "SAFETY",
    "PROHIBITED_CONTENT",
    "BLOCKLIST",
    "SPII",
    "IMAGE_SAFETY",
    "IMAGE_PROHIBITED_CONTENT",
})

_UNSPECIFIED_BLOCK_REASONS = {0, "0", "BLOCK_REASON_UNSPECIFIED"}

_QUOTED_RE = re.compile(r'^"(.*)"$', re.DOTALL)


def _enum_name(value: Any) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "name", None) or str(value)


def _mentions_safety(message: str) -> bool:
    return "SAFETY" in message.upper()


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _require(value: str, field: str, message: str) -> str:
    if not value or not value.strip():
        raise GenerationValidationError(message, field)
    return value.strip()


class GenerationService(IGenerationService):
    """
    Generative AI operations backed by Gemini.

    Args:
        llm: Chat model for text and JSON generation
        image_client: google-genai Client for image models
        image_edit_model: Model id used by apply_filter
        image_generation_model: Imagen model id for text-to-image
    """

    def __init__(
        self,
        llm: BaseChatModel,
        image_client: Any,
        image_edit_model: str,
        image_generation_model: str,
        today: Callable[[], str] = _today,
    ) -> None:
        self._llm = llm
        self._images = image_client
        self._image_edit_model = image_edit_model
        self._image_generation_model = image_generation_model
        self._today = today

    # -------------------------------------------------------------------------
    # Image operations
    # -------------------------------------------------------------------------

    async def apply_filter(self, images: Sequence[str], prompt: str) -> str:
        prompt = _require(prompt, "prompt", "A prompt is required to apply a filter.")
        if not images:
            raise GenerationValidationError("At least one image is required to apply a filter.", "images")
        decoded = [parse_image_input(image) for image in images]

        contents: list[Any] = [
            types.Part.from_bytes(data=image.data, mime_type=image.mime_type)
            for image in decoded
        ]
        contents.append(prompt)

        logger.info(f"Applying filter to {len(decoded)} image(s) with {self._image_edit_model}")
        response = await self._call_genai(
            "Applying the filter",
            lambda: self._images.aio.models.generate_content(
                model=self._image_edit_model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"]),
            ),
        )
        self._check_content_safety(response)

        candidates = response.candidates or []
        content = candidates[0].content if candidates else None
        parts = (content.parts if content else None) or []
        if not parts:
            raise MalformedResponseError()

        for part in parts:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return to_data_url(inline.data, inline.mime_type or "image/png")

        text = " ".join(part.text for part in parts if getattr(part, "text", None)).strip()
        logger.warning(f"Image model returned no image part (text: {text[:200]!r})")
        raise NoImageReturnedError(text or None)

    async def generate_image_from_prompt(self, prompt: str) -> str:
        prompt = _require(prompt, "prompt", "A description is required to generate an image.")

        logger.info(f"Generating image with {self._image_generation_model}")
        response = await self._call_genai(
            "Image generation",
            lambda: self._images.aio.models.generate_images(
                model=self._image_generation_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type="image/jpeg",
                    aspect_ratio="1:1",
                ),
            ),
        )

        generated = response.generated_images or []
        for item in generated:
            image = getattr(item, "image", None)
            if image is not None and image.image_bytes:
                return to_data_url(image.image_bytes, "image/jpeg")

        reasons = [item.rai_filtered_reason for item in generated if getattr(item, "rai_filtered_reason", None)]
        if reasons:
            raise SafetyBlockedError(reasons[0])
        raise MalformedResponseError(
            "Image generation failed to produce an image. Please try a different description."
        )

    async def generate_preview(self, description: str) -> str:
        description = _require(description, "description", "description is required")
        return await self.generate_image_from_prompt(
            prompts.STYLE_PREVIEW_IMAGE.format(description=description)
        )

    # -------------------------------------------------------------------------
    # Text operations
    # -------------------------------------------------------------------------

    async def improve_prompt(self, current_prompt: str) -> str:
        current_prompt = _require(current_prompt, "currentPrompt", "currentPrompt is required")
        return await self._invoke_text(prompts.IMPROVE_PROMPT_SYSTEM, current_prompt)

    async def generate_random_prompt(self) -> str:
        text = await self._invoke_text(prompts.RANDOM_PROMPT_SYSTEM, prompts.RANDOM_PROMPT_REQUEST)
        return _QUOTED_RE.sub(r"\1", text.strip()).strip()

    async def generate_full_filter(self, theme: str) -> GeneratedFilter:
        theme = _require(theme, "theme", "theme is required")
        concept = await self._invoke_json(
            prompts.FILTER_CONCEPT_SYSTEM,
            prompts.FULL_FILTER_REQUEST.format(theme=theme),
            FilterConcept,
        )
        preview = await self.generate_image_from_prompt(
            prompts.FILTER_PREVIEW_IMAGE.format(name=concept.name, description=concept.description)
        )
        return GeneratedFilter(preview_image_url=preview, **concept.model_dump())

    async def categorize_filter(self, name: str, description: str, prompt: str) -> FilterCategory:
        if not all(value and value.strip() for value in (name, description, prompt)):
            raise GenerationValidationError("name, description, and prompt are required")
        result = await self._invoke_json(
            None,
            prompts.CATEGORIZE_REQUEST.format(name=name, description=description, prompt=prompt),
            CategoryResult,
        )
        return FilterCategory(result.category)

    async def generate_trending_filter(self) -> GeneratedFilter:
        concept = await self._invoke_json(
            prompts.FILTER_CONCEPT_SYSTEM,
            prompts.TRENDING_FILTER_REQUEST.format(today=self._today()),
            FilterConcept,
        )
        preview = await self.generate_image_from_prompt(
            prompts.TRENDING_PREVIEW_IMAGE.format(name=concept.name, description=concept.description)
        )
        return GeneratedFilter(preview_image_url=preview, **concept.model_dump())

    # -------------------------------------------------------------------------
    # Provider calls
    # -------------------------------------------------------------------------

    async def _invoke_text(self, system: Optional[str], user: str) -> str:
        messages: list[BaseMessage] = []
        if system:
            messages.append(SystemMessage(content=system))
        messages.append(HumanMessage(content=user))

        try:
            response = await self._llm.ainvoke(messages)
        except ChatGoogleGenerativeAIError as e:
            if _mentions_safety(str(e)):
                raise SafetyBlockedError()
            logger.error(f"Text model call failed: {e}")
            raise TransportError(PROVIDER, str(e))
        except genai_errors.ClientError as e:
            if _mentions_safety(str(e)):
                raise SafetyBlockedError()
            logger.error(f"Text model rejected the request: {e}")
            raise ProviderError(
                f"Text generation was rejected: {e.message or e}",
                provider=PROVIDER,
                code="PROVIDER_REJECTED",
            )
        except genai_errors.APIError as e:
            logger.error(f"Text model call failed: {e}")
            raise TransportError(PROVIDER, str(e))
        except httpx.HTTPError as e:
            raise TransportError(PROVIDER, str(e) or type(e).__name__)

        self._check_message_safety(response)
        text = _message_text(response).strip()
        if not text:
            raise MalformedResponseError()
        return text

    async def _invoke_json(self, system: Optional[str], user: str, schema: type[M]) -> M:
        parser = JsonOutputParser(pydantic_object=schema)
        text = await self._invoke_text(system, f"{user}\n\n{parser.get_format_instructions()}")
        try:
            return schema.model_validate(parser.parse(text))
        except (OutputParserException, PydanticValidationError) as e:
            logger.error(f"Text model returned malformed {schema.__name__}: {e}")
            raise MalformedResponseError()

    async def _call_genai(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except genai_errors.ClientError as e:
            if _mentions_safety(str(e)):
                raise SafetyBlockedError()
            logger.error(f"{operation} was rejected by the provider: {e}")
            raise ProviderError(
                f"{operation} was rejected: {e.message or e}",
                provider=PROVIDER,
                code="PROVIDER_REJECTED",
            )
        except genai_errors.APIError as e:
            logger.error(f"{operation} failed: {e}")
            raise TransportError(PROVIDER, str(e))
        except httpx.HTTPError as e:
            raise TransportError(PROVIDER, str(e) or type(e).__name__)

    @staticmethod
    def _check_content_safety(response: Any) -> None:
        candidates = getattr(response, "candidates", None) or []
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = _enum_name(getattr(feedback, "block_reason", None)) if feedback else None
        if not candidates and block_reason and block_reason not in _UNSPECIFIED_BLOCK_REASONS:
            raise SafetyBlockedError(block_reason)
        for candidate in candidates:
            reason = _enum_name(getattr(candidate, "finish_reason", None))
            content = getattr(candidate, "content", None)
            if reason in SAFETY_FINISH_REASONS and not (content and content.parts):
                raise SafetyBlockedError(reason)

    @staticmethod
    def _check_message_safety(message: BaseMessage) -> None:
        metadata = getattr(message, "response_metadata", None) or {}
        feedback = metadata.get("prompt_feedback") or {}
        block_reason = feedback.get("block_reason") if isinstance(feedback, dict) else None
        if block_reason and block_reason not in _UNSPECIFIED_BLOCK_REASONS:
            raise SafetyBlockedError(_enum_name(block_reason))
        if _enum_name(metadata.get("finish_reason")) in SAFETY_FINISH_REASONS:
            raise SafetyBlockedError(_enum_name(metadata.get("finish_reason")))
