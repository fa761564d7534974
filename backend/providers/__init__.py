"""Generative AI provider implementations."""

from .base import LLMProvider, ModelConfig
from .factory import build_model_config, get_provider, get_providers, parse_model_string
from .gemini import GeminiProvider

__all__ = [
    "LLMProvider",
    "ModelConfig",
    "GeminiProvider",
    "build_model_config",
    "get_provider",
    "get_providers",
    "parse_model_string",
]
