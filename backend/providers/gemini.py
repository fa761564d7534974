"""Google Gemini provider implementation.

Text models go through the langchain-google-genai package; image editing
and Imagen generation go through the google-genai SDK.
Requires a valid API key for authentication.
"""

from google import genai
from google.genai import types
from langchain_google_genai import ChatGoogleGenerativeAI

from .base import LLMProvider, ModelConfig


class GeminiProvider(LLMProvider):
    """Provider for Google Gemini models.

    Available text models:
        - gemini-2.5-flash (fast and efficient, recommended)
        - gemini-2.5-pro (most capable)

    Image models:
        - gemini-2.5-flash-image-preview (image editing)
        - imagen-4.0-generate-001 (text to image)
    """

    def get_llm(self, config: ModelConfig) -> ChatGoogleGenerativeAI:
        """Return a ChatGoogleGenerativeAI client configured for Gemini.

        Args:
            config: Model configuration with Google AI API details

        Returns:
            A configured ChatGoogleGenerativeAI client

        Raises:
            ValueError: If api_key is not provided
        """
        self._require_key(config)

        return ChatGoogleGenerativeAI(
            model=config.model_id,
            google_api_key=config.api_key,
            timeout=config.timeout,
            max_retries=0,
        )

    def get_image_client(self, config: ModelConfig) -> genai.Client:
        """Return a google-genai client for the image models.

        Raises:
            ValueError: If api_key is not provided
        """
        self._require_key(config)

        http_options = None
        if config.timeout:
            # google-genai takes the timeout in milliseconds
            http_options = types.HttpOptions(timeout=int(config.timeout * 1000))
        return genai.Client(api_key=config.api_key, http_options=http_options)

    @staticmethod
    def _require_key(config: ModelConfig) -> None:
        if not config.api_key:
            raise ValueError(
                "Google AI API key is required. "
                "Set it via the GOOGLE_API_KEY environment variable."
            )
