"""Base classes and models for generative AI providers."""

from abc import ABC, abstractmethod
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from pydantic import BaseModel


class ModelConfig(BaseModel):
    """Configuration for a model, parsed from a "provider/model_id" string.

    Attributes:
        model_name: Full model string (e.g., "gemini/gemini-2.5-flash")
        provider_type: Extracted from model prefix (e.g., "gemini")
        model_id: Model identifier (e.g., "gemini-2.5-flash")
        api_key: API key for the provider
        timeout: Request timeout in seconds, None for the client default
    """

    model_config = {"frozen": True}

    model_name: str
    provider_type: str
    model_id: str
    api_key: str = ""
    timeout: float | None = None


class LLMProvider(ABC):
    """Abstract base class for generative AI providers.

    A provider hands out two kinds of clients: a langchain chat model for
    text and JSON generation, and a native client for image models, which
    langchain does not cover.
    """

    @abstractmethod
    def get_llm(self, config: ModelConfig) -> BaseChatModel:
        """Return a configured chat model for text generation.

        Args:
            config: Model configuration with provider details

        Returns:
            A configured langchain chat model
        """
        pass

    @abstractmethod
    def get_image_client(self, config: ModelConfig) -> Any:
        """Return a client able to edit and generate images.

        Args:
            config: Model configuration; only the credentials are used

        Returns:
            The provider's native client
        """
        pass
