import pytest

from plm_helper.config.loader import PlmConfig
from plm_helper.llm.factory import PROVIDER_INFO, ProviderType, create_provider, mask_api_key
from plm_helper.llm.providers import (
    AnthropicProvider,
    GeminiProvider,
    MiniMaxProvider,
    OllamaProvider,
    OpenAICompatibleProvider,
)


def make_config(**overrides):
    values = {"ai_enabled": True, "ai_api_key": "key-1234567890"}
    values.update(overrides)
    return PlmConfig(**values)


def test_every_provider_type_has_info():
    assert set(PROVIDER_INFO) == set(ProviderType)
    assert not PROVIDER_INFO[ProviderType.OLLAMA].requires_key


def test_disabled_returns_none():
    assert create_provider(make_config(ai_provider="groq", ai_enabled=False)) is None
    assert create_provider(make_config(ai_provider="none")) is None


def test_missing_key_returns_none():
    assert create_provider(make_config(ai_provider="openai", ai_api_key=None)) is None


@pytest.mark.parametrize(
    "tag, cls",
    [
        ("groq", OpenAICompatibleProvider),
        ("deepseek", OpenAICompatibleProvider),
        ("openai", OpenAICompatibleProvider),
        ("minimax", MiniMaxProvider),
        ("anthropic", AnthropicProvider),
        ("gemini", GeminiProvider),
    ],
)
def test_provider_classes(tag, cls):
    provider = create_provider(make_config(ai_provider=tag))
    assert type(provider) is cls
    assert provider.model == PROVIDER_INFO[ProviderType(tag)].default_model


def test_model_override():
    provider = create_provider(make_config(ai_provider="groq", ai_model="llama-3.1-8b-instant"))
    assert provider.model == "llama-3.1-8b-instant"
    assert provider.name == "Groq"


def test_ollama_needs_no_key():
    provider = create_provider(make_config(ai_provider="ollama", ai_api_key=None))
    assert isinstance(provider, OllamaProvider)
    assert provider.model == "llama2"


def test_unknown_provider_raises():
    with pytest.raises(ValueError):
        create_provider(make_config(ai_provider="skynet"))


@pytest.mark.parametrize(
    "key, expected",
    [
        (None, "(not set)"),
        ("", "(not set)"),
        ("short", "****"),
        ("12345678", "****"),
        ("sk-abcdefghijkl", "sk-a...ijkl"),
    ],
)
def test_mask_api_key(key, expected):
    assert mask_api_key(key) == expected
