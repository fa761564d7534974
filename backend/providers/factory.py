"""Factory functions for creating AI providers."""

from .base import LLMProvider, ModelConfig
from .gemini import GeminiProvider


def get_providers() -> dict[str, LLMProvider]:
    """Get instances of each provider type.

    Returns:
        Dictionary mapping provider type names to provider instances.
        Keys are: "gemini"
    """
    return {
        "gemini": GeminiProvider(),
    }


def parse_model_string(model: str) -> tuple[str, str]:
    """Parse 'provider/model_id' into (provider_type, model_id).

    A bare model id (no '/') is taken to be a Gemini model, which is how
    the image model settings are usually written.

    Args:
        model: Model string, e.g. "gemini/gemini-2.5-flash" or
               "imagen-4.0-generate-001"

    Returns:
        Tuple of (provider_type, model_id)

    Raises:
        ValueError: If the model string is empty or has an empty part
    """
    if not model or not model.strip():
        raise ValueError("Model string must not be empty")
    if "/" not in model:
        return "gemini", model.strip()
    provider_type, model_id = model.split("/", 1)
    if not provider_type or not model_id:
        raise ValueError(
            f"Invalid model string '{model}'. "
            "Expected format: 'provider/model_id' (e.g., 'gemini/gemini-2.5-flash')"
        )
    return provider_type, model_id


def build_model_config(model: str, api_key: str, timeout: float | None = None) -> ModelConfig:
    """Build a ModelConfig from a model string and credentials."""
    provider_type, model_id = parse_model_string(model)
    return ModelConfig(
        model_name=model,
        provider_type=provider_type,
        model_id=model_id,
        api_key=api_key,
        timeout=timeout,
    )


def get_provider(provider_type: str) -> LLMProvider:
    """Look up a provider by type.

    Raises:
        ValueError: If the provider type is not supported
    """
    providers = get_providers()
    if provider_type not in providers:
        raise ValueError(
            f"Unsupported provider '{provider_type}'. "
            f"Available: {', '.join(sorted(providers))}"
        )
    return providers[provider_type]
