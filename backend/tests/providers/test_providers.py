"""Tests for provider factory functions and the Gemini provider."""

from unittest.mock import patch

import pytest

from providers import (
    GeminiProvider,
    LLMProvider,
    ModelConfig,
    build_model_config,
    get_provider,
    get_providers,
    parse_model_string,
)


class TestParseModelString:
    def test_provider_prefix(self):
        assert parse_model_string("gemini/gemini-2.5-flash") == ("gemini", "gemini-2.5-flash")

    def test_bare_model_id_is_gemini(self):
        assert parse_model_string("imagen-4.0-generate-001") == ("gemini", "imagen-4.0-generate-001")

    @pytest.mark.parametrize("model", ["", "  ", "/gemini-2.5-flash", "gemini/"])
    def test_invalid(self, model):
        with pytest.raises(ValueError):
            parse_model_string(model)


class TestFactory:
    def test_get_providers(self):
        providers = get_providers()
        assert set(providers) == {"gemini"}
        assert all(isinstance(p, LLMProvider) for p in providers.values())

    def test_get_provider(self):
        assert isinstance(get_provider("gemini"), GeminiProvider)

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            get_provider("openai")

    def test_build_model_config(self):
        config = build_model_config("gemini/gemini-2.5-flash", "key", timeout=12.5)
        assert config == ModelConfig(
            model_name="gemini/gemini-2.5-flash",
            provider_type="gemini",
            model_id="gemini-2.5-flash",
            api_key="key",
            timeout=12.5,
        )


class TestGeminiProvider:
    def test_llm_requires_api_key(self):
        config = build_model_config("gemini/gemini-2.5-flash", "")
        with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
            GeminiProvider().get_llm(config)

    def test_image_client_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiProvider().get_image_client(build_model_config("imagen-4.0-generate-001", ""))

    def test_get_llm(self):
        config = build_model_config("gemini/gemini-2.5-flash", "key", timeout=30.0)
        with patch("providers.gemini.ChatGoogleGenerativeAI") as chat:
            GeminiProvider().get_llm(config)
        chat.assert_called_once_with(
            model="gemini-2.5-flash",
            google_api_key="key",
            timeout=30.0,
            max_retries=0,
        )

    def test_image_client_timeout_in_milliseconds(self):
        config = build_model_config("gemini-2.5-flash-image-preview", "key", timeout=30.0)
        with patch("providers.gemini.genai.Client") as client:
            GeminiProvider().get_image_client(config)
        kwargs = client.call_args.kwargs
        assert kwargs["api_key"] == "key"
        assert kwargs["http_options"].timeout == 30000

    def test_image_client_without_timeout(self):
        with patch("providers.gemini.genai.Client") as client:
            GeminiProvider().get_image_client(build_model_config("imagen-4.0-generate-001", "key"))
        assert client.call_args.kwargs["http_options"] is None
